"""
Audit session lifecycle: Idle -> Analyzing -> Results, with Reset back to Idle.

The analysis is simulated with a fixed delay. Each submit or reset bumps a
generation counter; a scheduled completion from an older generation is stale
and does nothing, so a late timer can never overwrite a newer result.
A re-upload while analyzing cancels the pending task and restarts.
"""

import logging
import os
import threading
import time
from collections import OrderedDict
from enum import Enum

from compliance.scoring import evaluate
from ui_audit.audit import audit_log
from ui_audit.presentation import STEPS, present_result
from ui_audit.upload import UploadedImage

log = logging.getLogger("ui_audit.session")


def analysis_delay_seconds() -> float:
    """Read at call time so values loaded from .env after import still apply."""
    return int(os.environ.get("UI_AUDIT_ANALYSIS_DELAY_MS", "2000")) / 1000


def progress_duration_seconds() -> float:
    return int(os.environ.get("UI_AUDIT_PROGRESS_DURATION_MS", "1900")) / 1000


class AuditState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    RESULTS = "results"


STEP_BY_STATE = {
    AuditState.IDLE: 0,
    AuditState.ANALYZING: 1,
    AuditState.RESULTS: 2,
}


def _build_snapshot(state: AuditState, progress: float, role, image, result) -> dict:
    return {
        "state": state.value,
        "step": STEP_BY_STATE[state],
        "steps": list(STEPS),
        "progress": round(progress, 1),
        "role": role,
        "image": {
            "filename": image.filename,
            "content_type": image.content_type,
            "data_url": image.data_url,
        } if image else None,
        "result": present_result(result) if result else None,
    }


def idle_snapshot() -> dict:
    """Snapshot for a browser that has no audit session yet."""
    return _build_snapshot(AuditState.IDLE, 0.0, None, None, None)


class AuditSession:
    """One user's audit widget: at most one analysis in flight."""

    def __init__(
        self,
        delay: float | None = None,
        progress_duration: float | None = None,
        timer_factory=threading.Timer,
        clock=time.monotonic,
    ):
        self.delay = analysis_delay_seconds() if delay is None else delay
        self.progress_duration = progress_duration_seconds() if progress_duration is None else progress_duration
        self._timer_factory = timer_factory
        self._clock = clock
        self._lock = threading.Lock()
        self._generation = 0
        self._timer = None
        self._started_at: float | None = None
        self._image: UploadedImage | None = None
        self._role: str | None = None
        self._result = None

    @property
    def state(self) -> AuditState:
        with self._lock:
            return self._state_unlocked()

    def _state_unlocked(self) -> AuditState:
        if self._image is None:
            return AuditState.IDLE
        if self._result is None:
            return AuditState.ANALYZING
        return AuditState.RESULTS

    @property
    def image(self) -> UploadedImage | None:
        with self._lock:
            return self._image

    @property
    def result(self):
        with self._lock:
            return self._result

    def submit(self, upload: UploadedImage, role=None) -> bool:
        """
        Start a simulated analysis of an uploaded screenshot.
        Returns False and leaves the session untouched if the upload is not an image.
        """
        if not upload.is_image:
            log.info("Ignoring non-image upload: filename=%s content_type=%s", upload.filename, upload.content_type)
            return False

        with self._lock:
            self._cancel_pending()
            self._generation += 1
            generation = self._generation
            self._image = upload
            self._role = role
            self._result = None
            self._started_at = self._clock()
            timer = self._timer_factory(self.delay, self._complete, args=(generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()
        log.debug("Analysis scheduled: generation=%d delay=%.2fs role=%s", generation, self.delay, role)
        return True

    def _complete(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._image is None:
                log.debug("Dropping stale analysis: generation=%d current=%d", generation, self._generation)
                return
            result = evaluate(self._role)
            self._result = result
            self._timer = None
            role = self._role
            image = self._image
        audit_log(
            action="complete",
            status="success",
            role=role,
            filename=image.filename,
            image_hash=image.sha256,
            score=result.score,
        )
        log.info("Analysis complete: score=%d issues=%d role=%s", result.score, len(result.issues), role)

    def reset(self) -> None:
        """Discard the image and result and cancel any pending analysis."""
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self._image = None
            self._role = None
            self._result = None
            self._started_at = None

    def _cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def progress(self) -> float:
        """Simulated progress 0-100 for the analyzing bar."""
        with self._lock:
            return self._progress_unlocked(self._state_unlocked())

    def _progress_unlocked(self, state: AuditState) -> float:
        if state is AuditState.IDLE:
            return 0.0
        if state is AuditState.RESULTS or self.progress_duration <= 0:
            return 100.0
        elapsed = self._clock() - self._started_at
        return min(100.0, elapsed / self.progress_duration * 100)

    def current_step(self) -> int:
        """Index into STEPS: 0 Upload, 1 Analyze, 2 Results."""
        return STEP_BY_STATE[self.state]

    def snapshot(self) -> dict:
        """JSON-ready view of the session, taken under one lock."""
        with self._lock:
            state = self._state_unlocked()
            progress = self._progress_unlocked(state)
            image = self._image
            result = self._result
            role = self._role
        return _build_snapshot(state, progress, role, image, result)


class SessionRegistry:
    """
    Audit sessions keyed by browser session id.
    Bounded: sessions idle longer than idle_ttl are evicted, and past max_sessions
    the least recently used one goes. Evicted sessions are reset.
    """

    def __init__(
        self,
        session_factory=AuditSession,
        max_sessions: int | None = None,
        idle_ttl: float | None = None,
        clock=time.monotonic,
    ):
        self._session_factory = session_factory
        self.max_sessions = max_sessions if max_sessions is not None else int(
            os.environ.get("UI_AUDIT_MAX_SESSIONS", "256")
        )
        self.idle_ttl = idle_ttl if idle_ttl is not None else float(
            os.environ.get("UI_AUDIT_SESSION_TTL_SECONDS", "1800")
        )
        self._clock = clock
        # Least recently used first; values are (session, last access time).
        self._sessions: OrderedDict[str, tuple[AuditSession, float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> AuditSession:
        """Session for this id, created if missing."""
        with self._lock:
            evicted = self._evict_expired_unlocked()
            session = self._touch_unlocked(session_id)
            if session is None:
                session = self._session_factory()
                self._sessions[session_id] = (session, self._clock())
                while len(self._sessions) > self.max_sessions:
                    _, (old, _) = self._sessions.popitem(last=False)
                    evicted.append(old)
        self._reset_evicted(evicted)
        return session

    def peek(self, session_id: str) -> AuditSession | None:
        """Session for this id if one exists; never creates."""
        with self._lock:
            evicted = self._evict_expired_unlocked()
            session = self._touch_unlocked(session_id)
        self._reset_evicted(evicted)
        return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.pop(session_id, None)
        if entry is not None:
            entry[0].reset()

    def _touch_unlocked(self, session_id: str) -> AuditSession | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        self._sessions[session_id] = (entry[0], self._clock())
        self._sessions.move_to_end(session_id)
        return entry[0]

    def _evict_expired_unlocked(self) -> list[AuditSession]:
        now = self._clock()
        evicted = []
        while self._sessions:
            session_id, (session, last_seen) = next(iter(self._sessions.items()))
            if now - last_seen <= self.idle_ttl:
                break
            del self._sessions[session_id]
            evicted.append(session)
        return evicted

    def _reset_evicted(self, evicted: list[AuditSession]) -> None:
        for session in evicted:
            session.reset()
        if evicted:
            log.debug("Evicted %d audit session(s); %d active", len(evicted), len(self._sessions))

    def __len__(self):
        return len(self._sessions)
