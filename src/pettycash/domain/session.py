"""Session context and balance refresher.

The logged-in account is held in an explicit ``SessionContext`` that the
CLI passes around, persisted to a small JSON file between invocations. Only
the account ID and name are stored; balances are always read fresh.

``BalanceRefresher`` re-reads the session account's balances on a fixed
interval in a background thread. It never writes to the database.
"""

import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from pettycash.database.base import Database
from pettycash.domain.account import AccountService
from pettycash.domain.entities import Account, BalanceSnapshot
from pettycash.domain.errors import NotFoundError, account_not_found

logger = logging.getLogger(__name__)

SESSION_PATH_ENV = "PETTYCASH_SESSION_PATH"
DEFAULT_REFRESH_INTERVAL = 10.0


@dataclass(frozen=True)
class SessionUser:
    """Identity of the logged-in account."""

    user_id: int
    name: str


def default_session_path() -> Path:
    """Return the session file path from PETTYCASH_SESSION_PATH or ~/.pettycash."""
    configured = os.environ.get(SESSION_PATH_ENV)
    if configured:
        return Path(configured)
    return Path.home() / ".pettycash" / "session.json"


class SessionContext:
    """Logged-in account with explicit load/save/clear lifecycle."""

    def __init__(self, store_path: Optional[Path] = None):
        self.store_path = Path(store_path) if store_path is not None else default_session_path()
        self._current: Optional[SessionUser] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[SessionUser]:
        return self._current

    @property
    def is_logged_in(self) -> bool:
        return self._current is not None

    def load(self) -> Optional[SessionUser]:
        """Read the saved session, discarding it if the file is unreadable."""
        with self._lock:
            self._current = None
            if not self.store_path.exists():
                return None
            try:
                data = json.loads(self.store_path.read_text(encoding="utf-8"))
                self._current = SessionUser(user_id=int(data["user_id"]), name=str(data["name"]))
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning("Discarding unreadable session file %s: %s", self.store_path, e)
                self._remove_file()
            return self._current

    def save(self, account: Account) -> SessionUser:
        """Remember ``account`` as the logged-in account."""
        user = SessionUser(user_id=account.id, name=account.name)
        with self._lock:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            self.store_path.write_text(
                json.dumps({"user_id": user.user_id, "name": user.name}), encoding="utf-8"
            )
            self._current = user
        logger.debug("Session saved for account %s", user.user_id)
        return user

    def clear(self) -> None:
        """Forget the logged-in account."""
        with self._lock:
            self._current = None
            self._remove_file()

    def login(self, account_service: AccountService, name: str, pin: str) -> Account:
        """Authenticate and save the session.

        Raises:
            AuthenticationError: If name and PIN don't match an account
        """
        account = account_service.authenticate(name, pin)
        self.save(account)
        logger.info("Account %s logged in", account.id)
        return account

    def logout(self) -> None:
        self.clear()

    def require(self, account_service: AccountService) -> Account:
        """Return the logged-in account, read fresh from the store.

        A session pointing at a deleted account is cleared.

        Raises:
            NotFoundError: If nobody is logged in or the account is gone
        """
        user = self._current
        if user is None:
            raise NotFoundError("Not logged in")
        account = account_service.get_account(user.user_id)
        if account is None:
            self.clear()
            raise NotFoundError(account_not_found(user.user_id))
        return account

    def _remove_file(self) -> None:
        try:
            self.store_path.unlink()
        except FileNotFoundError:
            pass


class BalanceRefresher:
    """Periodically re-read the session account's balances.

    Contract:
        - ``refresh_once()`` reads one snapshot (public for testing).
        - ``start()`` / ``stop()`` for background thread operation.
        - Stops by itself when the session ends or its account disappears.
    """

    def __init__(
        self,
        db_factory: Callable[[], Database],
        session: SessionContext,
        interval: float = DEFAULT_REFRESH_INTERVAL,
        on_refresh: Optional[Callable[[BalanceSnapshot], None]] = None,
    ):
        """Initialize balance refresher.

        Args:
            db_factory: Creates the database instance used by the refresh
                thread; sessions are not shared across threads
            session: Session whose account is refreshed
            interval: Seconds between refreshes
            on_refresh: Called with every new snapshot
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._db_factory = db_factory
        self._session = session
        self._interval = interval
        self._on_refresh = on_refresh
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._db: Optional[Database] = None
        self.latest: Optional[BalanceSnapshot] = None
        self.refresh_count = 0

    def refresh_once(self) -> Optional[BalanceSnapshot]:
        """Read the current snapshot, or None if there is nothing to refresh."""
        user = self._session.current
        if user is None:
            logger.debug("No session, stopping balance refresh")
            self._stop_event.set()
            return None

        if self._db is None:
            self._db = self._db_factory()
        snapshot = self._db.get_balance_snapshot(user.user_id)
        if snapshot is None:
            logger.warning("Session account %s no longer exists, ending session", user.user_id)
            self._session.clear()
            self._stop_event.set()
            return None

        self.latest = snapshot
        self.refresh_count += 1
        if self._on_refresh is not None:
            self._on_refresh(snapshot)
        return snapshot

    def start(self) -> None:
        """Start refreshing in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="balance-refresher",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Balance refresher started (every %ss)", self._interval)

    def stop(self, timeout: float = 5.0) -> None:
        """Signal stop and wait for the refresh thread to finish."""
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        if self._db is not None:
            self._db.disconnect()
            self._db = None
        logger.debug("Balance refresher stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the refresher stops by itself. Returns True if it did."""
        return self._stop_event.wait(timeout=timeout)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.refresh_once()
            except SQLAlchemyError:
                logger.exception("Balance refresh failed")
            # Wait for interval or until stopped
            self._stop_event.wait(timeout=self._interval)
