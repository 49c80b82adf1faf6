"""Token storage for short-lived metadata tokens."""

import json
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from token_server.duration.human import DEFAULT_DURATION, HumanDuration
from token_server.logging import get_logger

logger = get_logger("store")

EXPIRES_FORMAT = "%Y-%m-%d %H:%M:%S"

MetaData = dict[str, Any]


class TokenError(Exception):
    """Error while creating or updating a token."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


class MetaDataMustBeJsonObject(TokenError):
    def __init__(self):
        super().__init__("metadata must be a JSON object", "META_MUST_BE_OBJECT")


class InvalidToken(TokenError):
    def __init__(self):
        super().__init__("InvalidToken", "INVALID_TOKEN")


@dataclass
class StoredToken:
    """Metadata held for a token, with its expiry."""
    expires_at: datetime
    meta: MetaData


@dataclass
class PurgeResult:
    """Outcome of a purge cycle."""
    tokens: int
    purged: int

    def __str__(self) -> str:
        return f"PURGED: tokens: {self.tokens}, purged: {self.purged}"


@dataclass
class DumpEntry:
    """A live token as shown in a dump."""
    expires: datetime
    meta: MetaData

    def to_dict(self) -> dict:
        return {"expires": self.expires.strftime(EXPIRES_FORMAT), "meta": self.meta}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenStore:
    """Issues tokens and keeps their metadata until they expire."""

    def __init__(
        self,
        token_lifetime: HumanDuration = DEFAULT_DURATION,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.token_lifetime = token_lifetime
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens: dict[str, StoredToken] = {}
        self._shutdown: Callable[[], None] | None = None

    def with_token_lifetime(self, lifetime: HumanDuration) -> "TokenStore":
        self.token_lifetime = lifetime
        return self

    def with_shutdown(self, handle: Callable[[], None]) -> "TokenStore":
        self._shutdown = handle
        return self

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def create_token(self, meta: MetaData) -> str:
        """Store metadata under a new token and return the token."""
        if not isinstance(meta, dict):
            raise MetaDataMustBeJsonObject()

        token, stored = self._new_token(meta)
        with self._lock:
            self._tokens[token] = stored
        return token

    def update_token(self, token: str, meta_update: MetaData | None = None) -> tuple[str, MetaData]:
        """Replace a live token with a new one, merging in updated metadata.

        The old token is consumed even when it turns out to be expired.

        Raises:
            InvalidToken: If the token is unknown or expired.
            MetaDataMustBeJsonObject: If the update is not a dict.
        """
        if meta_update is not None and not isinstance(meta_update, dict):
            raise MetaDataMustBeJsonObject()

        with self._lock:
            stored = self._tokens.pop(token, None)
            if stored is None or stored.expires_at <= self._clock():
                raise InvalidToken()

            meta = dict(stored.meta)
            if meta_update:
                meta.update(meta_update)

            new_token, new_stored = self._new_token(meta)
            self._tokens[new_token] = new_stored

        return new_token, dict(meta)

    def remove_token(self, token: str) -> None:
        with self._lock:
            self._tokens.pop(token, None)

    def remove_expired_tokens(self) -> PurgeResult:
        now = self._clock()
        with self._lock:
            before = len(self._tokens)
            self._tokens = {
                token: stored
                for token, stored in self._tokens.items()
                if stored.expires_at >= now
            }
            remaining = len(self._tokens)

        return PurgeResult(tokens=remaining, purged=before - remaining)

    def dump_meta(self) -> list[DumpEntry]:
        """Log every live token with its expiry at DEBUG level."""
        with self._lock:
            report = [
                DumpEntry(expires=stored.expires_at, meta=stored.meta)
                for stored in self._tokens.values()
            ]

        logger.debug("DUMP: %s", json.dumps([entry.to_dict() for entry in report]))
        return report

    def shutdown(self) -> None:
        if self._shutdown is not None:
            self._shutdown()

    def _new_token(self, meta: MetaData) -> tuple[str, StoredToken]:
        token = str(uuid.uuid4())
        return token, StoredToken(expires_at=self._clock() + self.token_lifetime, meta=meta)
