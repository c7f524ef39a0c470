import json
import os
import sys
from pathlib import Path

import pytest


# Ensure `src/backend` is on sys.path so imports like `import adapters...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)


@pytest.fixture
def event_log_fixtures() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def event_log_dir(event_log_fixtures) -> Path:
    return event_log_fixtures / "event_log"


@pytest.fixture
def write_json(tmp_path):
    def _write(name: str, payload) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
