"""Document store for the minimal platform user model.

Users registered through `/api/users/register` live outside the
relational schema, as one document per email. Two interchangeable
stores implement `UserDocumentStore`:

- `FileUserDocumentStore` keeps documents in a JSON file (default).
- `MongoUserDocumentStore` keeps them in a MongoDB collection with a
  unique index on `email`; used when `MONGODB_URL` is configured.
"""

from __future__ import annotations

import json
import logging
import re
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .errors import PortalError, StorageError
from .passwords import PasswordHasher

logger = logging.getLogger("eduportal.documents")

USER_TYPES = ("student", "admin", "institute")


class RegistrationFailed(PortalError):
    status_code = 400
    default_message = "Error registering user"


class DuplicateDocument(Exception):
    """Raised by a store when the email is already registered."""


class DocumentStoreUnavailable(Exception):
    """Raised by a store when the backing storage cannot be used."""


class UserDocument(BaseModel):
    email: str = Field(min_length=1)
    password_hash: str
    user_type: Literal["student", "admin", "institute"]
    name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def public(self) -> dict:
        """Serialisable view without the password hash."""
        return self.model_dump(mode="json", exclude={"password_hash"})


def _sanitize_mongo_error(raw: str) -> str:
    if not raw:
        return raw
    # Hide credentials embedded in connection URLs.
    return re.sub(r"(mongodb(?:\+srv)?://)([^/@\s]+)@", r"\1***:***@", raw)


class UserDocumentStore(ABC):
    @abstractmethod
    def insert(self, document: UserDocument) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserDocument]:
        raise NotImplementedError

    def close(self) -> None:
        pass


class FileUserDocumentStore(UserDocumentStore):
    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        if not self.path.exists():
            self.path.write_text("{}", encoding="utf-8")

    def _read(self) -> dict:
        try:
            return json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise DocumentStoreUnavailable(str(exc)) from exc

    def _write(self, payload: dict) -> None:
        try:
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise DocumentStoreUnavailable(str(exc)) from exc

    def insert(self, document: UserDocument) -> None:
        with self._lock:
            existing = self._read()
            if document.email in existing:
                raise DuplicateDocument(document.email)
            existing[document.email] = document.model_dump(mode="json")
            self._write(existing)

    def get_by_email(self, email: str) -> Optional[UserDocument]:
        with self._lock:
            raw = self._read().get(email)
        return UserDocument.model_validate(raw) if raw else None


class MongoUserDocumentStore(UserDocumentStore):
    def __init__(self, mongodb_url: str, db_name: str):
        from pymongo import ASCENDING, MongoClient

        self._client = MongoClient(mongodb_url, serverSelectionTimeoutMS=3000, tz_aware=True)
        self._users = self._client[db_name]["users"]
        self._users.create_index([("email", ASCENDING)], unique=True, name="ux_users_email")

    def insert(self, document: UserDocument) -> None:
        from pymongo.errors import DuplicateKeyError, PyMongoError

        try:
            self._users.insert_one(document.model_dump())
        except DuplicateKeyError as exc:
            raise DuplicateDocument(document.email) from exc
        except PyMongoError as exc:
            raise DocumentStoreUnavailable(_sanitize_mongo_error(str(exc))) from exc

    def get_by_email(self, email: str) -> Optional[UserDocument]:
        from pymongo.errors import PyMongoError

        try:
            raw = self._users.find_one({"email": email}, {"_id": 0})
        except PyMongoError as exc:
            raise DocumentStoreUnavailable(_sanitize_mongo_error(str(exc))) from exc
        return UserDocument.model_validate(raw) if raw else None

    def close(self) -> None:
        self._client.close()


def open_user_store(settings) -> UserDocumentStore:
    """Build the configured store: MongoDB when a URL is set, else the JSON file."""
    if settings.MONGODB_URL:
        store = MongoUserDocumentStore(settings.MONGODB_URL, settings.MONGODB_DB)
        logger.info("user documents stored in MongoDB database %s", settings.MONGODB_DB)
        return store
    logger.info("user documents stored in %s", settings.USER_DOCUMENTS_PATH)
    return FileUserDocumentStore(settings.USER_DOCUMENTS_PATH)


class UserRegistrationService:
    """Register users in the document store with hashed passwords.

    An existing email is rejected before hashing; the store's own
    duplicate check still guards concurrent registrations.
    """
    def __init__(self, store: UserDocumentStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    def register(self, email: Optional[str], password: Optional[str], user_type: Optional[str], name: Optional[str] = None) -> UserDocument:
        if not email or not password or not user_type:
            raise RegistrationFailed()
        if user_type not in USER_TYPES:
            raise RegistrationFailed()
        try:
            if self.store.get_by_email(email) is not None:
                raise RegistrationFailed()
        except DocumentStoreUnavailable as exc:
            raise StorageError("Error registering user") from exc
        now = datetime.now(timezone.utc)
        document = UserDocument(
            email=email,
            password_hash=self.hasher.hash(password),
            user_type=user_type,
            name=name,
            created_at=now,
            updated_at=now,
        )
        try:
            self.store.insert(document)
        except DuplicateDocument:
            raise RegistrationFailed()
        except DocumentStoreUnavailable as exc:
            raise StorageError("Error registering user") from exc
        return document

