import os
import tempfile

# Keep app.log / audit.log out of the working tree; must run before ui_audit is imported.
os.environ.setdefault("UI_AUDIT_LOG_DIR", tempfile.mkdtemp(prefix="ui_audit_logs_"))

import pytest

from ui_audit.session import AuditSession
from ui_audit.upload import UploadedImage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def audit_dir(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr("ui_audit.audit.AUDIT_DIR", log_dir)
    return log_dir


@pytest.fixture
def timers():
    return []


@pytest.fixture
def timer_factory(timers):
    def factory(interval, function, args=()):
        timer = FakeTimer(interval, function, args)
        timers.append(timer)
        return timer
    return factory


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def audit_session(timer_factory, clock):
    return AuditSession(delay=2.0, progress_duration=1.9, timer_factory=timer_factory, clock=clock)


@pytest.fixture
def png_upload():
    return UploadedImage(filename="screen.png", content_type="image/png", data=PNG_BYTES)
