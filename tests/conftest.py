"""
pgrest - Test Configuration (conftest.py)
=========================================

What:  Shared pytest fixtures for the whole suite.
Why:   Resolution tests pass explicit environment mappings and file paths,
       so nothing depends on the developer's shell or home directory.

Fixtures (function-scoped):
    ├── testdata_config: path to tests/testdata/prest.toml
    ├── write_config:    writes a TOML string to a temp file, returns its path
    ├── environ:         minimal environment mapping (queries dir in tmp)
    ├── debug_config:    PrestConfig with debug on (no JWT middleware)
    └── test_client:     HTTPX AsyncClient bound to an app built from debug_config
"""

import os
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override process settings BEFORE any app imports, so a stray
# create_app() never touches the real home directory.
os.environ["PREST_QUERIES_LOCATION"] = tempfile.mkdtemp(prefix="pgrest_test_")
os.environ["PREST_LOG_LEVEL"] = "WARNING"

from pgrest.config import PrestConfig  # noqa: E402

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture
def testdata_config() -> str:
    return str(TESTDATA / "prest.toml")


@pytest.fixture
def write_config(tmp_path):
    """
    Factory fixture: write_config('[http]\\nport = 1') → path to the file.

    Each call writes a new file under the test's tmp_path.
    """
    counter = {"n": 0}

    def _write(content: str) -> str:
        counter["n"] += 1
        path = tmp_path / f"prest_{counter['n']}.toml"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def environ(tmp_path):
    """Environment mapping with only the queries directory redirected."""
    return {"PREST_QUERIES_LOCATION": str(tmp_path / "queries")}


@pytest.fixture
def debug_config(tmp_path):
    return PrestConfig(debug=True, queries_path=str(tmp_path / "queries"))


@pytest_asyncio.fixture
async def test_client(debug_config):
    """
    HTTPX AsyncClient talking to an app built from `debug_config`.

    ASGITransport does not run the lifespan, so no database engine exists.
    """
    from pgrest.main import create_app

    app = create_app(config=debug_config)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
