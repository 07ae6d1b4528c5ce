"""
Application Layer for the workout session engine.

This package contains:
- ports/: Abstract collaborator interfaces (what the use cases need)
- use_cases/: One class per session operation
- services/: Background health export
"""
