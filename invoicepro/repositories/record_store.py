import json
import logging
import os
import tempfile
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from invoicepro.core.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Predicate = Callable[[Record], bool]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def matches(record: Record, term: str, fields: Iterable[str]) -> bool:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    needle = term.lower()
    for field in fields:
        value = record.get(field)
        if value is not None and needle in str(value).lower():
            return True
    return False


class RecordStore(ABC):
    """
    Keyed storage for one collection of JSON-like records.

    Services depend on this interface only; the backing medium (flat file,
    SQL table) is an implementation detail.
    """

    def __init__(self, collection: str):
        self.collection = collection

    @abstractmethod
    def list(self) -> List[Record]:
        ...

    @abstractmethod
    def get(self, record_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def create(self, data: Record) -> Record:
        ...

    @abstractmethod
    def update(self, record_id: str, partial: Record) -> Record:
        ...

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        ...

    def find_one(self, field: str, value: Any) -> Optional[Record]:
        return next((r for r in self.list() if r.get(field) == value), None)

    def filter(self, predicate: Predicate) -> List[Record]:
        return [r for r in self.list() if predicate(r)]

    def count(self, predicate: Optional[Predicate] = None) -> int:
        if predicate is None:
            return len(self.list())
        return len(self.filter(predicate))

    def search(self, term: str, fields: Iterable[str]) -> List[Record]:
        fields = list(fields)
        return self.filter(lambda r: matches(r, term, fields))

    @staticmethod
    def _new_record(data: Record) -> Record:
        record = dict(data)
        record["id"] = str(uuid.uuid4())
        record["createdAt"] = utc_now()
        return record


class JSONFileStore(RecordStore):
    """
    A collection persisted as one JSON array file.

    The whole file is loaded on every call and rewritten on every mutation.
    A missing file is an empty collection. A file that cannot be parsed is
    moved aside and reported, then also treated as empty.
    """

    def __init__(self, collection: str, data_dir: str):
        super().__init__(collection)
        self.data_dir = data_dir
        self.path = os.path.join(data_dir, f"{collection}.json")
        self._lock = threading.RLock()
        os.makedirs(data_dir, exist_ok=True)
        if not os.path.exists(self.path):
            self._write([])

    def _read(self) -> List[Record]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            self._quarantine(f"unreadable: {e}")
            return []
        if not isinstance(data, list):
            self._quarantine(f"expected a JSON array, found {type(data).__name__}")
            return []
        return data

    def _quarantine(self, reason: str) -> None:
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        target = f"{self.path}.corrupt-{stamp}"
        try:
            os.replace(self.path, target)
            logger.error(
                f"Store file {self.path} is {reason}; moved to {target} and continuing with an empty collection"
            )
        except OSError as e:
            logger.error(f"Store file {self.path} is {reason} and could not be moved aside: {e}")

    def _write(self, records: List[Record]) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{self.collection}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, default=str)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def list(self) -> List[Record]:
        with self._lock:
            return self._read()

    def get(self, record_id: str) -> Optional[Record]:
        return next((r for r in self.list() if r.get("id") == record_id), None)

    def create(self, data: Record) -> Record:
        record = self._new_record(data)
        with self._lock:
            records = self._read()
            records.append(record)
            self._write(records)
        return record

    def update(self, record_id: str, partial: Record) -> Record:
        with self._lock:
            records = self._read()
            for index, record in enumerate(records):
                if record.get("id") == record_id:
                    records[index] = {**record, **partial, "id": record_id}
                    self._write(records)
                    return records[index]
        raise RecordNotFoundError(self.collection, record_id)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            records = self._read()
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                return False
            self._write(remaining)
            return True
