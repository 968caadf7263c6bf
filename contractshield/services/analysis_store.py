"""In-memory store of the most recent analyses."""
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List
import logging
import uuid

from pydantic import BaseModel, ConfigDict, Field

from contractshield.errors import NotFound

logger = logging.getLogger(__name__)

TEXT_SOURCE_LABEL = "text"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_analysis_id() -> str:
    return str(uuid.uuid4())


class AnalysisRecord(BaseModel):
    """A stored analysis outcome. Created once, never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_analysis_id)
    created_at: datetime = Field(default_factory=_utcnow)
    source_label: str = TEXT_SOURCE_LABEL
    analysis: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "sourceLabel": self.source_label,
            "analysis": self.analysis,
        }


class AnalysisStore:
    """
    Bounded insertion-ordered store.

    Holds at most ``capacity`` records; inserting past capacity evicts the
    oldest-inserted record. Reads never change eviction order.
    """

    def __init__(self, capacity: int = 20):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._records: "OrderedDict[str, AnalysisRecord]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, analysis_id: str) -> bool:
        return analysis_id in self._records

    def put(self, record: AnalysisRecord) -> None:
        if record.id in self._records:
            raise ValueError(f"Analysis id already stored: {record.id}")
        self._records[record.id] = record
        while len(self._records) > self.capacity:
            evicted_id, _ = self._records.popitem(last=False)
            logger.info(f"Evicted oldest analysis, id: {evicted_id}")

    def get(self, analysis_id: str) -> AnalysisRecord:
        record = self._records.get(analysis_id)
        if record is None:
            raise NotFound(f"Analysis '{analysis_id}' not found")
        return record

    def list_recent(self, limit: int = 10) -> List[AnalysisRecord]:
        """Records sorted newest first, truncated to ``limit``."""
        if limit <= 0:
            return []
        # reversed() keeps insertion order as the tie-break for equal timestamps
        records = sorted(reversed(self._records.values()), key=lambda r: r.created_at, reverse=True)
        return records[:limit]

    def clear(self) -> None:
        self._records.clear()
