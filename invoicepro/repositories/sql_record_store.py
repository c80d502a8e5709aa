from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, sessionmaker

from invoicepro.core.database import SessionLocal
from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.models.record import Record as RecordRow
from invoicepro.repositories.record_store import Record, RecordStore


class SQLRecordStore(RecordStore):
    """RecordStore backed by the ``records`` table, one short-lived session per call."""

    def __init__(self, collection: str, session_factory: sessionmaker = SessionLocal):
        super().__init__(collection)
        self._session_factory = session_factory

    def _query(self, db: Session):
        return db.query(RecordRow).filter(RecordRow.collection == self.collection)

    def list(self) -> List[Record]:
        db: Session = self._session_factory()
        try:
            rows = self._query(db).order_by(RecordRow.created_at.asc()).all()
            return [dict(row.data) for row in rows]
        finally:
            db.close()

    def get(self, record_id: str) -> Optional[Record]:
        db: Session = self._session_factory()
        try:
            row = self._query(db).filter(RecordRow.id == record_id).first()
            return dict(row.data) if row else None
        finally:
            db.close()

    def create(self, data: Record) -> Record:
        record = self._new_record(data)
        db: Session = self._session_factory()
        try:
            db.add(RecordRow(
                id=record["id"],
                collection=self.collection,
                data=record,
                created_at=datetime.now(timezone.utc),
            ))
            db.commit()
            return record
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, record_id: str, partial: Record) -> Record:
        db: Session = self._session_factory()
        try:
            row = self._query(db).filter(RecordRow.id == record_id).first()
            if not row:
                raise RecordNotFoundError(self.collection, record_id)
            merged = {**row.data, **partial, "id": record_id}
            row.data = merged
            db.commit()
            return merged
        except RecordNotFoundError:
            raise
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, record_id: str) -> bool:
        db: Session = self._session_factory()
        try:
            row = self._query(db).filter(RecordRow.id == record_id).first()
            if not row:
                return False
            db.delete(row)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
