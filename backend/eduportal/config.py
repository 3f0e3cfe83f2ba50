"""Application settings and validation."""

import os
from pathlib import Path
from typing import Optional

BASE = Path(__file__).resolve().parent.parent

SUPPORTED_HASH_SCHEMES = ("pbkdf2_sha256", "bcrypt")
# bcrypt work factor used when no rounds are configured.
BCRYPT_DEFAULT_ROUNDS = 10


class Settings:
    ENV: str
    DATABASE_URL: str
    REQUIRE_DATABASE_URL: bool
    PASSWORD_HASH_SCHEME: str
    PASSWORD_HASH_ROUNDS: Optional[int]
    MONGODB_URL: Optional[str]
    MONGODB_DB: str
    USER_DOCUMENTS_PATH: Path
    ALLOW_DEV_CORS: bool
    HOST: str
    PORT: int
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}")
        self.REQUIRE_DATABASE_URL = os.getenv("REQUIRE_DATABASE_URL", "false").lower() == "true"
        self.PASSWORD_HASH_SCHEME = os.getenv("PASSWORD_HASH_SCHEME", "pbkdf2_sha256").lower()
        rounds = os.getenv("PASSWORD_HASH_ROUNDS")
        self.PASSWORD_HASH_ROUNDS = int(rounds) if rounds else None
        if self.PASSWORD_HASH_ROUNDS is None and self.PASSWORD_HASH_SCHEME == "bcrypt":
            self.PASSWORD_HASH_ROUNDS = BCRYPT_DEFAULT_ROUNDS
        self.MONGODB_URL = os.getenv("MONGODB_URL") or None
        self.MONGODB_DB = os.getenv("MONGODB_DB", "eduportal")
        self.USER_DOCUMENTS_PATH = Path(os.getenv("USER_DOCUMENTS_PATH", str(BASE / "users.json")))
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "5000"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    @property
    def using_default_database(self) -> bool:
        return self.DATABASE_URL == f"sqlite:///{BASE / 'app.db'}"

    def _validate(self):
        if self.PASSWORD_HASH_SCHEME not in SUPPORTED_HASH_SCHEMES:
            raise RuntimeError(
                f"PASSWORD_HASH_SCHEME must be one of {', '.join(SUPPORTED_HASH_SCHEMES)}"
            )
        if self.PASSWORD_HASH_ROUNDS is not None and self.PASSWORD_HASH_ROUNDS < 1:
            raise RuntimeError("PASSWORD_HASH_ROUNDS must be a positive integer")
        if self.ENV != "dev" and self.REQUIRE_DATABASE_URL and self.using_default_database:
            raise RuntimeError("DATABASE_URL must be set explicitly in non-dev environments")
