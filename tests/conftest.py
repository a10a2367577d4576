import io

import pytest

from regexfilter.builder import ConfigBuilder


class _UnreadableStream(io.BytesIO):
    """Yields its buffered lines, then fails like a device read error."""

    def readline(self, size=-1):
        line = super().readline(size)
        if not line:
            raise OSError(5, "Input/output error")
        return line


@pytest.fixture
def stdout_buffer():
    return io.BytesIO()


@pytest.fixture
def builder(stdout_buffer):
    b = ConfigBuilder(stdin=io.BytesIO(b""), stdout=stdout_buffer)
    yield b
    b.close()


@pytest.fixture
def write_input(tmp_path):
    def _write(data: bytes, name: str = "input") -> str:
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return _write


@pytest.fixture
def failing_stream():
    return _UnreadableStream
