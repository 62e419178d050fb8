import pytest


@pytest.fixture(autouse=True)
def isolated_app_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    for name in ("CHESSAHOOCHEE_DB_PATH", "CHESSAHOOCHEE_IO_ERROR_POLICY", "CHESSAHOOCHEE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
