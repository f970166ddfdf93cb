# newsverify/history.py
"""Per-user analysis history.

Two backends share one interface: an in-process store for development and
tests, and a Firestore store (collection ``analysis_history``) for
deployments. Every read and delete is scoped to the owning user; a record
owned by someone else behaves exactly like a missing one.
"""
import copy
import logging
import math
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from google.cloud import firestore as gcf

from .errors import NotFoundError, ValidationError
from .models import AnalysisResult, AnalysisStats, CredibilityDistribution, HistoryRecord
from .scoring import credibility_band

logger = logging.getLogger(__name__)

COLLECTION = "analysis_history"

# public sort key -> stored field name
SORT_FIELDS = {
    "timestamp": "timestamp",
    "created_at": "timestamp",
    "credibilityScore": "credibility_score",
    "title": "title",
}
MAX_PAGE_SIZE = 100


def _check_paging(page: int, limit: int, sort_by: str, order: str) -> str:
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if sort_by not in SORT_FIELDS:
        raise ValidationError(f"sortBy must be one of: {', '.join(sorted(SORT_FIELDS))}")
    if order not in ("asc", "desc"):
        raise ValidationError("order must be 'asc' or 'desc'")
    return SORT_FIELDS[sort_by]

def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0

def summarize_scores(scores: List[int]) -> AnalysisStats:
    dist = CredibilityDistribution()
    for s in scores:
        band = credibility_band(s)
        if band == "credible":
            dist.high += 1
        elif band == "mixed":
            dist.medium += 1
        else:
            dist.low += 1
    average = round(sum(scores) / len(scores)) if scores else 0
    return AnalysisStats(total_analyses=len(scores), credibility_distribution=dist, average_credibility=average)


class HistoryStore:
    """Interface; see ``InMemoryHistoryStore`` and ``FirestoreHistoryStore``."""

    name = "abstract"

    def insert(self, user_id: str, result: AnalysisResult) -> HistoryRecord:
        raise NotImplementedError

    def list(self, user_id: str, page: int = 1, limit: int = 20,
             sort_by: str = "timestamp", order: str = "desc") -> Tuple[List[HistoryRecord], int]:
        raise NotImplementedError

    def get(self, user_id: str, record_id: str) -> HistoryRecord:
        raise NotImplementedError

    def delete(self, user_id: str, record_id: str) -> None:
        raise NotImplementedError

    def delete_all(self, user_id: str) -> int:
        raise NotImplementedError

    def scores(self, user_id: str) -> List[int]:
        raise NotImplementedError

    def stats(self, user_id: str) -> AnalysisStats:
        return summarize_scores(self.scores(user_id))


class InMemoryHistoryStore(HistoryStore):
    name = "memory"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._records: Dict[str, HistoryRecord] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def insert(self, user_id, result):
        record = HistoryRecord(
            **result.model_dump(),
            id=uuid.uuid4().hex,
            user_id=user_id,
            timestamp=self._clock(),
        )
        with self._lock:
            self._records[record.id] = record
        return copy.deepcopy(record)

    def _owned(self, user_id):
        return [r for r in self._records.values() if r.user_id == user_id]

    def list(self, user_id, page=1, limit=20, sort_by="timestamp", order="desc"):
        field = _check_paging(page, limit, sort_by, order)
        with self._lock:
            records = self._owned(user_id)
        records.sort(key=lambda r: (getattr(r, field), r.timestamp, r.id), reverse=(order == "desc"))
        start = (page - 1) * limit
        return copy.deepcopy(records[start:start + limit]), len(records)

    def get(self, user_id, record_id):
        with self._lock:
            record = self._records.get(record_id)
        if record is None or record.user_id != user_id:
            raise NotFoundError("The requested analysis does not exist or you do not have access to it")
        return copy.deepcopy(record)

    def delete(self, user_id, record_id):
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.user_id != user_id:
                raise NotFoundError("The requested analysis does not exist or you do not have access to it")
            del self._records[record_id]

    def delete_all(self, user_id):
        with self._lock:
            ids = [r.id for r in self._owned(user_id)]
            for record_id in ids:
                del self._records[record_id]
        return len(ids)

    def scores(self, user_id):
        with self._lock:
            return [r.credibility_score for r in self._owned(user_id)]


class FirestoreHistoryStore(HistoryStore):
    name = "firestore"

    def __init__(self, db):
        self.db = db

    @property
    def _col(self):
        return self.db.collection(COLLECTION)

    @staticmethod
    def _to_record(snap) -> HistoryRecord:
        d = snap.to_dict()
        d["id"] = snap.id
        return HistoryRecord.model_validate(d)

    def insert(self, user_id, result):
        data = result.model_dump(mode="json")
        data["user_id"] = user_id
        data["timestamp"] = datetime.now(timezone.utc)
        # add() returns (write time, DocumentReference)
        _, doc_ref = self._col.add(data)
        return HistoryRecord(**data, id=doc_ref.id)

    def list(self, user_id, page=1, limit=20, sort_by="timestamp", order="desc"):
        field = _check_paging(page, limit, sort_by, order)
        owned = self._col.where("user_id", "==", user_id)
        total = owned.count().get()[0][0].value
        direction = gcf.Query.DESCENDING if order == "desc" else gcf.Query.ASCENDING
        docs = owned.order_by(field, direction=direction).offset((page - 1) * limit).limit(limit).stream()
        return [self._to_record(d) for d in docs], int(total)

    def _owned_snapshot(self, user_id, record_id):
        snap = self._col.document(record_id).get()
        if not snap.exists or (snap.to_dict() or {}).get("user_id") != user_id:
            raise NotFoundError("The requested analysis does not exist or you do not have access to it")
        return snap

    def get(self, user_id, record_id):
        return self._to_record(self._owned_snapshot(user_id, record_id))

    def delete(self, user_id, record_id):
        self._owned_snapshot(user_id, record_id).reference.delete()

    def delete_all(self, user_id):
        deleted = 0
        for snap in self._col.where("user_id", "==", user_id).stream():
            snap.reference.delete()
            deleted += 1
        return deleted

    def scores(self, user_id):
        docs = self._col.where("user_id", "==", user_id).select(["credibility_score"]).stream()
        return [int((d.to_dict() or {}).get("credibility_score", 0)) for d in docs]


def store_from_settings(settings) -> HistoryStore:
    if settings.HISTORY_BACKEND == "firestore":
        from .firebase import get_db
        return FirestoreHistoryStore(get_db(settings))
    if settings.HISTORY_BACKEND != "memory":
        raise ValueError(f"Unknown HISTORY_BACKEND: {settings.HISTORY_BACKEND!r}")
    logger.info("Using in-memory analysis history")
    return InMemoryHistoryStore()
