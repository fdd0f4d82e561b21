"""
共用 fixture
"""
import pytest

from britfix import BritishEngine


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """所有測試使用暫存設定目錄，不碰使用者家目錄"""
    config_dir = tmp_path / "britfix-config"
    monkeypatch.setenv("BRITFIX_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def engine():
    return BritishEngine()
