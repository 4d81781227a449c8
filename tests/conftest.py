# tests/conftest.py

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.taskboard directory."""
    home = tmp_path / "taskboard-home"
    monkeypatch.setenv("TASKBOARD_HOME", str(home))
    monkeypatch.delenv("TASKBOARD_API_URL", raising=False)
    return home
