"""
Business logic for users.

``UserService`` registers accounts and exchanges e‑mail/password pairs
for access tokens.  Login failures always raise the same
``AuthError("Invalid credentials")`` whether the account is missing or
the password is wrong, and both paths perform one password hash
verification so they take comparable time.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import transaction
from ..core.errors import AuthError, ConflictError, parse_model
from ..core.security import create_access_token, hash_password, verify_password
from ..schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserRead

logger = logging.getLogger(__name__)


class UserService:
    """Registration and login against the ``users`` table."""

    _dummy_hash: Optional[str] = None

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    @classmethod
    def _timing_hash(cls) -> str:
        if cls._dummy_hash is None:
            cls._dummy_hash = hash_password("timing-equalizer")
        return cls._dummy_hash

    async def register(self, email: str, password: str) -> int:
        """Create a user and return the new id.

        Raises ``ValidationError`` for a malformed e‑mail or a password
        shorter than six characters, ``ConflictError`` if the
        normalized e‑mail is already taken.
        """
        data = parse_model(RegisterRequest, {"email": email, "password": password})
        exists = self.conn.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone()
        if exists:
            raise ConflictError("Email already registered")
        hashed = hash_password(data.password)
        try:
            with transaction(self.conn) as cursor:
                cursor.execute("INSERT INTO users (email, password) VALUES (?, ?)", (data.email, hashed))
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            # Lost a race with a concurrent registration of the same address.
            raise ConflictError("Email already registered") from exc
        logger.info("Registered user %s (%s)", user_id, data.email)
        return user_id

    async def login(self, email: str, password: str) -> LoginResponse:
        """Verify credentials and issue a signed 7‑day access token."""
        data = parse_model(LoginRequest, {"email": email, "password": password})
        row = self.conn.execute(
            "SELECT id, email, password FROM users WHERE email = ?", (data.email,)
        ).fetchone()
        if row is None:
            verify_password(data.password, self._timing_hash())
            logger.info("Failed login for %s", data.email)
            raise AuthError("Invalid credentials")
        if not verify_password(data.password, row["password"]):
            logger.info("Failed login for %s", data.email)
            raise AuthError("Invalid credentials")
        token = create_access_token({"user_id": row["id"], "email": row["email"]})
        return LoginResponse(token=token, user=UserRead(id=row["id"], email=row["email"]))
