import pytest

from awop.persistence import SelectionStore, ShareLink
from awop.session import WheelSession


@pytest.fixture(autouse=True)
def _isolated_storage(tmp_path, monkeypatch):
    monkeypatch.setenv("AWOP_STORAGE_DIR", str(tmp_path / "awop-home"))


@pytest.fixture
def store(tmp_path):
    return SelectionStore(tmp_path / "storage.json")


@pytest.fixture
def session(store):
    return WheelSession(store=store, link=ShareLink())


@pytest.fixture
def loaded_session(session):
    session.load()
    return session


class RecordingSession:
    """Stand-in for the session that records what the gesture machines ask for."""

    def __init__(self):
        self.calls = []

    def move_token_to_band(self, token, band):
        self.calls.append(("move", token.name, band))
        return True

    def toggle_focus(self, token):
        self.calls.append(("toggle", token.name))

    def clear_focus(self):
        self.calls.append(("clear",))
        return True

    def dismiss_panels(self):
        self.calls.append(("dismiss",))


@pytest.fixture
def recorder():
    return RecordingSession()
