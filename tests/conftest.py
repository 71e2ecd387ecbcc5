import os

import pytest
from fastapi.testclient import TestClient

from webfs.api_server.api import create_api_app
from webfs.core.config import ServerConfig

SAMPLE_BYTES = bytes(i % 251 for i in range(500))


def token(path) -> str:
    """Path token as a client would put it in the URL (no leading slash)."""
    return str(path).lstrip("/")


@pytest.fixture
def tree(tmp_path):
    """
    tmp_path/
      sub/
        dir1/
        Zeta/
        A.txt      (10 bytes)
        b.txt      (3 bytes)
      sample.bin   (500 bytes)
    """
    sub = tmp_path / "sub"
    (sub / "dir1").mkdir(parents=True)
    (sub / "Zeta").mkdir()
    (sub / "A.txt").write_bytes(b"0123456789")
    (sub / "b.txt").write_bytes(b"abc")
    (tmp_path / "sample.bin").write_bytes(SAMPLE_BYTES)

    # Deterministic mtimes, newest last.
    for offset, name in enumerate(["dir1", "Zeta", "A.txt", "b.txt"]):
        stamp = 1_700_000_000 + offset * 60
        os.utime(sub / name, (stamp, stamp))
    return tmp_path


@pytest.fixture
def config():
    return ServerConfig()


@pytest.fixture
def client(config):
    return TestClient(create_api_app(config))
