import pytest
from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test from an empty working directory with no user config."""
    workdir = tmp_path / 'work'
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr(Path, 'home', lambda: tmp_path / 'home')
    monkeypatch.delenv('GOPACKAGE', raising=False)
    return workdir
