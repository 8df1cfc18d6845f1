"""
Session Store

JSON-file persistence for analytics sessions and daily summaries. Each
session lives in its own document so writes to different sessions never
touch the same file.
"""

import hashlib
import json
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from threading import Lock
from typing import Callable, List, Optional

from .errors import SessionNotFound, StorageUnavailable
from .models import DailySummary, Session

logger = logging.getLogger(__name__)

LOCK_STRIPES = 64


class SessionStore:
    """File-backed store with atomic per-document updates."""

    def __init__(self, data_dir: Path):
        """Initialize the session store.

        Args:
            data_dir: Root directory for analytics data
        """
        self.data_dir = Path(data_dir)
        self.sessions_dir = self.data_dir / "sessions"
        self.summaries_dir = self.data_dir / "daily_summaries"
        # Fixed pool; a session id always maps to the same lock
        self._locks: List[Lock] = [Lock() for _ in range(LOCK_STRIPES)]

        try:
            self.sessions_dir.mkdir(parents=True, exist_ok=True)
            self.summaries_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot prepare data directory {self.data_dir}: {exc}") from exc

    def _session_file(self, session_id: str) -> Path:
        # Session ids are client supplied, so never use them as file names directly
        digest = hashlib.sha256(session_id.encode("utf-8")).hexdigest()
        return self.sessions_dir / f"{digest}.json"

    def _summary_file(self, day: date) -> Path:
        return self.summaries_dir / f"{day.isoformat()}.json"

    def _lock_for(self, session_id: str) -> Lock:
        digest = hashlib.sha256(session_id.encode("utf-8")).digest()
        return self._locks[int.from_bytes(digest[:4], "big") % LOCK_STRIPES]

    def _write_temp(self, directory: Path, payload: dict) -> Path:
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return Path(tmp_name)

    def _read(self, path: Path) -> Optional[dict]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None

    def is_available(self) -> bool:
        """Check that the data directory is writable."""
        return self.sessions_dir.is_dir() and os.access(self.sessions_dir, os.W_OK)

    # =====================
    # Sessions
    # =====================

    def create(self, session: Session) -> bool:
        """Persist a new session unless one with the same id exists.

        Returns:
            True if the session was created, False if it already existed
        """
        target = self._session_file(session.session_id)
        if target.exists():
            return False
        try:
            tmp = self._write_temp(self.sessions_dir, session.to_dict())
            try:
                # link() fails if the target exists, so racing creators produce one record
                os.link(tmp, target)
            except FileExistsError:
                return False
            finally:
                tmp.unlink(missing_ok=True)
        except OSError as exc:
            logger.error(f"Failed to create session {session.session_id}: {exc}")
            raise StorageUnavailable(f"Failed to create session: {exc}") from exc

        logger.info(f"Created session {session.session_id} ({session.device}, {session.browser}, {session.os})")
        return True

    def get(self, session_id: str) -> Optional[Session]:
        """Load a session by id, or None if it does not exist."""
        path = self._session_file(session_id)
        try:
            data = self._read(path)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Failed to load session {session_id}: {exc}")
            raise StorageUnavailable(f"Failed to load session: {exc}") from exc
        if data is None:
            return None
        try:
            return Session.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error(f"Corrupt session record {path.name} for {session_id}: {exc}")
            raise StorageUnavailable(f"Corrupt session record: {exc}") from exc

    def exists(self, session_id: str) -> bool:
        return self._session_file(session_id).exists()

    def update(self, session_id: str, mutator: Callable[[Session], None]) -> Session:
        """Apply ``mutator`` to a session and persist it atomically.

        Raises:
            SessionNotFound: if no session with that id exists
            StorageUnavailable: if the read or write fails
        """
        with self._lock_for(session_id):
            session = self.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)

            mutator(session)

            target = self._session_file(session_id)
            try:
                tmp = self._write_temp(self.sessions_dir, session.to_dict())
                os.replace(tmp, target)
            except OSError as exc:
                logger.error(f"Failed to update session {session_id}: {exc}")
                raise StorageUnavailable(f"Failed to update session: {exc}") from exc
            return session

    def list_sessions(self) -> List[Session]:
        """Load every session, oldest visit first."""
        sessions = []
        try:
            paths = sorted(self.sessions_dir.glob("*.json"))
        except OSError as exc:
            raise StorageUnavailable(f"Failed to scan sessions: {exc}") from exc

        for path in paths:
            if path.name.startswith("."):
                continue
            try:
                data = self._read(path)
            except OSError as exc:
                raise StorageUnavailable(f"Failed to read {path.name}: {exc}") from exc
            except json.JSONDecodeError as exc:
                logger.warning(f"Skipping unreadable session file {path.name}: {exc}")
                continue
            if data is None:
                # removed between glob and read
                continue
            try:
                sessions.append(Session.from_dict(data))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed session file {path.name}: {exc}")

        sessions.sort(key=lambda s: (s.visit_date, s.session_id))
        return sessions

    def count(self) -> int:
        return len(self.list_sessions())

    # =====================
    # Daily summaries
    # =====================

    def save_daily_summary(self, summary: DailySummary) -> None:
        """Write (or overwrite) the rollup for one date."""
        try:
            tmp = self._write_temp(self.summaries_dir, summary.to_dict())
            os.replace(tmp, self._summary_file(summary.date))
        except OSError as exc:
            logger.error(f"Failed to save daily summary {summary.date}: {exc}")
            raise StorageUnavailable(f"Failed to save daily summary: {exc}") from exc

    def load_daily_summary(self, day: date) -> Optional[DailySummary]:
        try:
            data = self._read(self._summary_file(day))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageUnavailable(f"Failed to load daily summary {day}: {exc}") from exc
        return DailySummary.from_dict(data) if data is not None else None

    def list_daily_summaries(self) -> List[DailySummary]:
        summaries = []
        for path in sorted(self.summaries_dir.glob("*.json")):
            if path.name.startswith("."):
                continue
            summary = self.load_daily_summary(date.fromisoformat(path.stem))
            if summary is not None:
                summaries.append(summary)
        return summaries
