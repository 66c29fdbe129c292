"""Persisted bearer/refresh token storage."""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jwt
import structlog

from opsmgmt.exceptions import StorageError

logger = structlog.get_logger(__name__)

# Tokens expiring within this many seconds are treated as already expired
_EXPIRY_LEEWAY_SECONDS = 5


@dataclass(frozen=True, slots=True)
class StoredTokens:
    access_token: str | None = None
    refresh_token: str | None = None


def is_token_valid(token: str, now: float | None = None) -> bool:
    """Return True unless ``token`` is a JWT whose ``exp`` has passed.

    Opaque (non-JWT) tokens cannot be inspected and are considered valid; the
    server has the final word and answers 401 otherwise.
    """
    if not token:
        return False
    try:
        claims: dict[str, Any] = jwt.decode(
            token, options={"verify_signature": False, "verify_exp": False}
        )
    except jwt.PyJWTError:
        return True
    exp = claims.get("exp")
    if exp is None:
        return True
    current = time.time() if now is None else now
    try:
        return float(exp) - _EXPIRY_LEEWAY_SECONDS > current
    except (TypeError, ValueError):
        return False


class TokenStore(ABC):
    """Abstract base for client-side token persistence."""

    @abstractmethod
    def load(self) -> StoredTokens:
        """Return the stored tokens (fields are None when absent)."""

    @abstractmethod
    def save(self, tokens: StoredTokens) -> None:
        """Persist both tokens, replacing whatever was stored."""

    @abstractmethod
    def clear(self) -> None:
        """Remove both stored tokens."""

    def bearer_token(self) -> str | None:
        """Return the access token if one is stored and still valid."""
        token = self.load().access_token
        if token and is_token_valid(token):
            return token
        return None


class InMemoryTokenStore(TokenStore):
    """Token store for tests and short-lived scripts."""

    def __init__(self, access_token: str | None = None, refresh_token: str | None = None) -> None:
        self._tokens = StoredTokens(access_token=access_token, refresh_token=refresh_token)

    def load(self) -> StoredTokens:
        return self._tokens

    def save(self, tokens: StoredTokens) -> None:
        self._tokens = tokens

    def clear(self) -> None:
        self._tokens = StoredTokens()


class FileTokenStore(TokenStore):
    """Token store backed by a small JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> StoredTokens:
        if not self._path.exists():
            return StoredTokens()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("token_file_unreadable", path=str(self._path), error=str(exc))
            return StoredTokens()
        if not isinstance(data, dict):
            return StoredTokens()
        return StoredTokens(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    def save(self, tokens: StoredTokens) -> None:
        payload = {"access_token": tokens.access_token, "refresh_token": tokens.refresh_token}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload), encoding="utf-8")
            self._path.chmod(0o600)
        except OSError as exc:
            msg = f"Cannot write token file {self._path}: {exc}"
            raise StorageError(msg) from exc

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            msg = f"Cannot remove token file {self._path}: {exc}"
            raise StorageError(msg) from exc
        logger.debug("tokens_cleared", path=str(self._path))
