"""Named TOTP secrets, held in memory and mirrored to a key-value store.

The registry is the single owner of the account list: every mutation takes
the registry lock and is written to the store before the lock is released.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel

from totpkeeper import base32
from totpkeeper.clock import TimeLike
from totpkeeper.exceptions import InvalidSecret
from totpkeeper.otp import decode_secret
from totpkeeper.totp import TOTP

logger = logging.getLogger(__name__)

ACCOUNTS_KEY = "accounts"


class Account(BaseModel):
    id: str
    name: str
    secret: str


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """Dict-backed store, used in tests and for throwaway registries."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileStore:
    """Keeps every key in a single JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)


def validate_secret(secret: str) -> str:
    """Return the normalised form of ``secret``, or raise InvalidSecret."""
    normalized = base32.normalize(secret)
    decode_secret(normalized)
    return normalized


class AccountRegistry:
    """In-memory account list synced to a KeyValueStore."""

    def __init__(self, store: KeyValueStore, time_step: int = 30, digits: int = 6) -> None:
        self.store = store
        self.time_step = time_step
        self.digits = digits
        self._accounts: list[Account] = []
        self._lock = threading.Lock()

    def load(self) -> list[Account]:
        """Replace the in-memory list with what the store holds."""
        raw = self.store.get(ACCOUNTS_KEY) or []
        with self._lock:
            self._accounts = [Account.model_validate(item) for item in raw]
        logger.debug("Loaded %d accounts", len(self._accounts))
        return self.accounts()

    def accounts(self) -> list[Account]:
        with self._lock:
            return list(self._accounts)

    def get(self, account_id: str) -> Account | None:
        with self._lock:
            for account in self._accounts:
                if account.id == account_id:
                    return account
        return None

    def add(self, name: str, secret: str) -> Account:
        """Validate and store a new account.

        Raises ValueError when a field is empty and InvalidSecret when the
        secret does not decode; nothing is stored in either case.
        """
        name = name.strip()
        secret = base32.normalize(secret)
        if not name or not secret:
            raise ValueError("Both a name and a secret are required")
        try:
            secret = validate_secret(secret)
        except InvalidSecret:
            logger.warning("Rejected secret for account %r", name)
            raise

        with self._lock:
            account = Account(id=self._next_id(), name=name, secret=secret)
            self._accounts.append(account)
            self._save()
        logger.info("Added account %s (%s)", account.id, account.name)
        return account

    def remove(self, account_id: str) -> bool:
        """Delete an account. Returns False if no account has that id."""
        with self._lock:
            remaining = [a for a in self._accounts if a.id != account_id]
            if len(remaining) == len(self._accounts):
                return False
            self._accounts = remaining
            self._save()
        logger.info("Removed account %s", account_id)
        return True

    def codes(self, for_time: TimeLike | None = None) -> dict[str, str | None]:
        """Current code per account id; None for a secret that no longer decodes."""
        if for_time is None:
            for_time = time.time()
        result: dict[str, str | None] = {}
        for account in self.accounts():
            try:
                result[account.id] = TOTP(account.secret, digits=self.digits, interval=self.time_step).at(for_time)
            except InvalidSecret as e:
                logger.warning("Cannot generate code for account %s: %s", account.id, e)
                result[account.id] = None
        return result

    def _next_id(self) -> str:
        # Caller holds the lock.
        taken = {a.id for a in self._accounts}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _save(self) -> None:
        # Caller holds the lock.
        self.store.set(ACCOUNTS_KEY, [a.model_dump() for a in self._accounts])
