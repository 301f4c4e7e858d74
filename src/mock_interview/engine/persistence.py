# Session Persistence
"""
Durable side-channel for interview sessions.

The in-memory SessionStore stays authoritative; what is written here is a
derived copy. Writes go through PersistenceDispatcher, which runs them on a
worker pool and only logs failures.
"""

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from .interfaces import SessionPersistence
from .models import Report

logger = logging.getLogger(__name__)


SESSION_FILENAMES = {
    "session": "session.json",
    "answers": "answers.json",
    "report": "report.json",
}


class JsonFileSessionPersistence(SessionPersistence):
    """Stores each session as JSON files in its own directory."""

    def __init__(self, base_dir: str):
        self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        logger.info(f"JsonFileSessionPersistence initialized, storage: {self._base}")

    def _session_dir(self, session_id: str) -> Path:
        d = self._base / session_id
        d.mkdir(parents=True, exist_ok=True)
        return d

    def _path(self, session_id: str, artifact: str) -> Path:
        return self._session_dir(session_id) / SESSION_FILENAMES[artifact]

    def _write_json(self, path: Path, payload: Any) -> None:
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)

    def save(self, session_id: str, snapshot: Dict[str, Any]) -> None:
        with self._lock:
            self._write_json(self._path(session_id, "session"), snapshot)

    def append_answer(self, session_id: str, ordinal: int, answer_text: str) -> None:
        with self._lock:
            path = self._path(session_id, "answers")
            answers = json.loads(path.read_text(encoding="utf-8")) if path.exists() else []
            answers.append({
                "question_index": ordinal,
                "answer": answer_text,
                "saved_at": datetime.now().isoformat(),
            })
            self._write_json(path, answers)

    def save_report(self, session_id: str, report: Report) -> None:
        with self._lock:
            self._write_json(self._path(session_id, "report"), report.model_dump(mode="json"))

    def load_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        path = self._base / session_id / SESSION_FILENAMES["session"]
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def load_answers(self, session_id: str) -> List[Dict[str, Any]]:
        path = self._base / session_id / SESSION_FILENAMES["answers"]
        if not path.exists():
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def load_report(self, session_id: str) -> Optional[Dict[str, Any]]:
        path = self._base / session_id / SESSION_FILENAMES["report"]
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def list_sessions(self) -> List[str]:
        if not self._base.exists():
            return []
        return sorted(d.name for d in self._base.iterdir() if d.is_dir())


class PersistenceDispatcher:
    """
    Runs persistence calls in the background.

    Failures are logged at WARNING and never reach the caller. Writes for a
    single dispatcher run on a single worker by default, so they land in
    submission order.
    """

    def __init__(self, persistence: Optional[SessionPersistence], max_workers: int = 1):
        self.persistence = persistence
        self._executor = (
            ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="persistence")
            if persistence is not None else None
        )
        self._pending: List[Future] = []
        self._pending_lock = Lock()

    @property
    def enabled(self) -> bool:
        return self.persistence is not None

    def _run(self, operation: str, session_id: str, call: Callable[[], None]) -> None:
        try:
            call()
        except Exception as e:
            logger.warning(f"Persistence {operation} failed for session {session_id}: {e}")

    def _submit(self, operation: str, session_id: str, call: Callable[[], None]) -> None:
        if self._executor is None:
            return
        try:
            future = self._executor.submit(self._run, operation, session_id, call)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Persistence {operation} dropped for session {session_id}: {e}")
            return
        with self._pending_lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)

    def save(self, session_id: str, snapshot: Dict[str, Any]) -> None:
        if self.persistence is not None:
            self._submit("save", session_id, lambda: self.persistence.save(session_id, snapshot))

    def append_answer(self, session_id: str, ordinal: int, answer_text: str) -> None:
        if self.persistence is not None:
            self._submit(
                "append_answer", session_id,
                lambda: self.persistence.append_answer(session_id, ordinal, answer_text)
            )

    def save_report(self, session_id: str, report: Report) -> None:
        if self.persistence is not None:
            self._submit(
                "save_report", session_id,
                lambda: self.persistence.save_report(session_id, report)
            )

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every queued write has run."""
        with self._pending_lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
