from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT / "src", ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from gleaner.invariants import EnforcementConfig, enforcement_config_scope
from gleaner.scope_stack import isolated_scope_stack
from tests.env_helpers import env_scope as _env_scope


@pytest.fixture(autouse=True)
def _scope_isolation_fixture():
    with enforcement_config_scope(EnforcementConfig()):
        with isolated_scope_stack():
            yield


@pytest.fixture
def env_scope():
    return _env_scope


@pytest.fixture
def write_source(tmp_path: Path):
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
