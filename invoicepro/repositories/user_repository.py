from typing import Any, Dict, List, Optional

from invoicepro.models.user import User
from invoicepro.repositories.record_store import Record, RecordStore


class UserRepository:
    """
    Users collection. Stored records carry a ``password`` bcrypt hash; every
    method returning ``User`` strips it. Raw records are exposed only to the
    auth service.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def list(self) -> List[User]:
        return [User.model_validate(r) for r in self.store.list()]

    def list_records(self) -> List[Record]:
        return self.store.list()

    def get(self, user_id: str) -> Optional[User]:
        record = self.store.get(user_id)
        return User.model_validate(record) if record else None

    def get_record_by_username(self, username: str) -> Optional[Record]:
        return self.store.find_one("username", username)

    def create(self, data: Dict[str, Any]) -> User:
        return User.model_validate(self.store.create(data))

    def update(self, user_id: str, changes: Dict[str, Any]) -> User:
        return User.model_validate(self.store.update(user_id, changes))

    def delete(self, user_id: str) -> bool:
        return self.store.delete(user_id)

    def count(self) -> int:
        return self.store.count()
