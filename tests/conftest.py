# conftest.py - shared fixtures
import pytest

from patchforge import AccessHistory, WriteContext, WriteTool


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def history(clock):
    return AccessHistory(clock=clock)


@pytest.fixture
def context(tmp_path):
    return WriteContext(working_directory=str(tmp_path))


@pytest.fixture
def tool(context, history):
    return WriteTool(context, history)


@pytest.fixture
def make_file(tmp_path, history):
    """Create a file under tmp_path; by default also record that it was read."""

    def _make(name, content, *, read=True):
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        data = content if isinstance(content, bytes) else content.encode("utf-8")
        p.write_bytes(data)
        if read:
            history.record_read(str(p), data.decode("utf-8", errors="replace"))
        return p

    return _make
