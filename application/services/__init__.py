"""
Application services coordinating work beyond a single use case.
"""

from application.services.health_sync import HealthSyncService, estimate_energy

__all__ = ["HealthSyncService", "estimate_energy"]
