import pytest


@pytest.fixture(autouse=True)
def isolate_config_discovery(tmp_path, monkeypatch):
    """Run every test from an empty temporary directory.

    The loader discovers ``.changelog.yml`` and ``.changelog.j2`` from the
    current directory upwards. Moving into a fresh directory keeps a
    developer's own files from leaking into the tests.
    """
    monkeypatch.chdir(tmp_path)
    yield tmp_path
