"""
Pytest configuration and fixtures for genesis2000 tests.
"""
import io

import pytest

from genesis2000 import InfoConfig, StreamTransport


def make_transport(*reply_lines: str) -> StreamTransport:
    """StreamTransport whose host side has already queued ``reply_lines``."""
    data = "".join(f"{line}\n" for line in reply_lines).encode("utf-8")
    return StreamTransport(reader=io.BytesIO(data), writer=io.BytesIO())


def sent_lines(transport: StreamTransport) -> list:
    return transport.writer.getvalue().decode("utf-8").splitlines()


@pytest.fixture
def genesis_dir(tmp_path):
    """A fake Genesis install tree with the dump directory in place."""
    (tmp_path / "share" / "tmp").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def info_config(genesis_dir):
    return InfoConfig(base_dir=str(genesis_dir), pid=4242)
