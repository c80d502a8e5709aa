import logging
from typing import List, Optional

import bcrypt

from invoicepro.core.config import settings
from invoicepro.core.exceptions import DuplicateRecordError
from invoicepro.models.user import User, UserCreate, UserUpdate
from invoicepro.repositories.registry import Repositories

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def is_password_hash(value: str) -> bool:
    return isinstance(value, str) and value.startswith(("$2a$", "$2b$", "$2y$"))


def verify_password(password: str, stored_hash: str) -> bool:
    if not is_password_hash(stored_hash):
        return False
    try:
        return bcrypt.checkpw(password.encode(), stored_hash.encode())
    except ValueError:
        logger.warning("Malformed password hash encountered during login")
        return False


class AuthService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def authenticate(self, username: str, password: str) -> Optional[User]:
        record = self.repos.users.get_record_by_username(username)
        if not record or not verify_password(password, record.get("password", "")):
            logger.info(f"Failed login for username '{username}'")
            return None
        return User.model_validate(record)

    def list_users(self) -> List[User]:
        return self.repos.users.list()

    def create_user(self, payload: UserCreate) -> User:
        if self.repos.users.get_record_by_username(payload.username):
            raise DuplicateRecordError("username", payload.username)
        data = payload.model_dump()
        data["password"] = hash_password(payload.password)
        user = self.repos.users.create(data)
        logger.info(f"Created user {user.username} ({user.role})")
        return user

    def update_user(self, user_id: str, changes: UserUpdate) -> User:
        data = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "username" in data:
            existing = self.repos.users.get_record_by_username(data["username"])
            if existing and existing["id"] != user_id:
                raise DuplicateRecordError("username", data["username"])
        if "password" in data:
            data["password"] = hash_password(data["password"])
        return self.repos.users.update(user_id, data)

    def ensure_default_admin(self) -> Optional[User]:
        """Create the bootstrap admin account when no users exist yet."""
        if self.repos.users.count() > 0:
            return None
        admin = self.create_user(UserCreate(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password=settings.DEFAULT_ADMIN_PASSWORD,
            email=settings.DEFAULT_ADMIN_EMAIL,
            role="admin",
        ))
        logger.warning(f"Created default admin user '{admin.username}'; change its password")
        return admin

    def rehash_plaintext_passwords(self) -> int:
        """Replace any plaintext passwords left in the users collection with bcrypt hashes."""
        upgraded = 0
        for record in self.repos.users.list_records():
            password = record.get("password")
            if password and not is_password_hash(password):
                self.repos.users.update(record["id"], {"password": hash_password(password)})
                upgraded += 1
        if upgraded:
            logger.warning(f"Hashed {upgraded} plaintext password(s) found in the users collection")
        return upgraded
