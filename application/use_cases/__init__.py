"""
Application Use Cases for the workout session engine.

Use cases are the entry points for session operations. Each one takes ids,
fetches the current aggregate, applies one pure domain operation, checks
invariants and persists the result with a single write.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain services and repository ports
- Dependencies are injected via constructors for testability
- Use cases return domain models and raise domain exceptions

Usage:
    from application.use_cases import StartSessionUseCase, AddSetUseCase

    start = StartSessionUseCase(
        session_repo=session_repo,
        template_repo=template_repo,
        catalog=catalog,
    )
    session = await start.execute("tpl-push-day")

    add_set = AddSetUseCase(session_repo=session_repo, catalog=catalog)
    session = await add_set.execute(session.id, session.exercises[0].id)
"""

from application.use_cases.exercise_operations import (
    AddExerciseToSessionUseCase,
    FinishExerciseUseCase,
    ReorderExercisesUseCase,
    UpdateExerciseNotesUseCase,
)
from application.use_cases.group_operations import (
    AdvanceToNextRoundUseCase,
    CompleteGroupSetUseCase,
    UpdateGroupSetUseCase,
)
from application.use_cases.manage_session import (
    CancelSessionUseCase,
    EndSessionUseCase,
    GetActiveSessionUseCase,
    PauseSessionUseCase,
    ResumeSessionUseCase,
)
from application.use_cases.set_operations import (
    AddSetUseCase,
    RemoveSetUseCase,
    ToggleSetCompletionUseCase,
    UpdateAllSetsUseCase,
    UpdateSetUseCase,
)
from application.use_cases.start_session import StartSessionUseCase
from application.use_cases.warmup import (
    AddWarmupSetsToAllExercisesUseCase,
    AddWarmupSetsUseCase,
)

__all__ = [
    # Lifecycle
    "StartSessionUseCase",
    "EndSessionUseCase",
    "CancelSessionUseCase",
    "PauseSessionUseCase",
    "ResumeSessionUseCase",
    "GetActiveSessionUseCase",
    # Sets
    "AddSetUseCase",
    "RemoveSetUseCase",
    "UpdateSetUseCase",
    "UpdateAllSetsUseCase",
    "ToggleSetCompletionUseCase",
    # Warmups
    "AddWarmupSetsUseCase",
    "AddWarmupSetsToAllExercisesUseCase",
    # Exercises
    "FinishExerciseUseCase",
    "ReorderExercisesUseCase",
    "AddExerciseToSessionUseCase",
    "UpdateExerciseNotesUseCase",
    # Groups
    "CompleteGroupSetUseCase",
    "AdvanceToNextRoundUseCase",
    "UpdateGroupSetUseCase",
]
