import logging
from typing import Protocol

from job_harvester.models import JobRecord

logger = logging.getLogger(__name__)


class RecordCollector(Protocol):
    """Receives batches of finished records from a crawl session, in extraction order."""

    def submit_records(self, records: list[JobRecord]) -> None: ...


class MemoryCollector:
    """Accumulates submitted records in memory."""

    def __init__(self) -> None:
        self.records: list[JobRecord] = []

    def submit_records(self, records: list[JobRecord]) -> None:
        self.records.extend(records)
        logger.debug(f"Collector now holds {len(self.records)} records")

    @property
    def count(self) -> int:
        return len(self.records)

    def reset(self) -> None:
        self.records = []
