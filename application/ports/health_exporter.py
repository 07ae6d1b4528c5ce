"""
Health Exporter Interface (Port).

Exports finished workouts to a platform health store. The exporter hands
back a correlation id when a workout starts; the engine stores it on the
session and passes it back on end or cancel.
"""

from datetime import datetime
from typing import Any, Dict, Protocol


class HealthExporter(Protocol):
    """Abstract interface for health-data export."""

    async def start_session(self, activity_type: str, start_date: datetime) -> str:
        """
        Begin a workout in the health store.

        Args:
            activity_type: Activity identifier (e.g., "traditional_strength_training")
            start_date: When the workout started

        Returns:
            Correlation id for later end/cancel calls

        Raises:
            Exception: If the health store is unavailable
        """
        ...

    async def end_session(
        self,
        correlation_id: str,
        end_date: datetime,
        estimated_energy: float,
        metadata: Dict[str, Any],
    ) -> None:
        """
        Finish and save a workout in the health store.

        Args:
            correlation_id: Id returned by ``start_session``
            end_date: When the workout ended
            estimated_energy: Estimated active energy in kcal
            metadata: Summary values (totalVolume, exerciseCount, workoutName)
        """
        ...

    async def cancel_session(self, correlation_id: str) -> None:
        """Discard a workout started with ``start_session``."""
        ...
