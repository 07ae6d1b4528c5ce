"""
HealthExporter that only logs.

Stands in for a platform health store when none is available; every call
succeeds and is visible in the log.
"""

import logging
from datetime import datetime
from typing import Any, Dict
from uuid import uuid4

logger = logging.getLogger(__name__)


class LoggingHealthExporter:
    """HealthExporter protocol implementation writing to the log."""

    async def start_session(self, activity_type: str, start_date: datetime) -> str:
        correlation_id = str(uuid4())
        logger.info(
            f"Health workout {correlation_id} started: {activity_type} at {start_date.isoformat()}"
        )
        return correlation_id

    async def end_session(
        self,
        correlation_id: str,
        end_date: datetime,
        estimated_energy: float,
        metadata: Dict[str, Any],
    ) -> None:
        logger.info(
            f"Health workout {correlation_id} ended at {end_date.isoformat()}: "
            f"{estimated_energy:.0f} kcal, {metadata}"
        )

    async def cancel_session(self, correlation_id: str) -> None:
        logger.info(f"Health workout {correlation_id} cancelled")
