"""YAML 配置加载测试"""

import pytest

from joblock.config import AppSettings, ConfigLoader, load_yaml_config


SETTINGS_YAML = """
lock:
  queued_ttl: 1d
  executing_ttl: 10m
  key_prefix: "svc:lock:"
redis:
  url: "redis://localhost:6379/1"
logging:
  level: DEBUG
"""


@pytest.fixture(autouse=True)
def clear_config_cache():
    ConfigLoader.clear_cache()
    yield
    ConfigLoader.clear_cache()


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SETTINGS_YAML, encoding="utf-8")
    return path


class TestConfigLoader:
    """ConfigLoader 测试"""

    def test_load(self, settings_file):
        config = ConfigLoader.load(str(settings_file))

        assert config["lock"]["queued_ttl"] == "1d"
        assert config["redis"]["url"] == "redis://localhost:6379/1"

    def test_relative_path_with_base_dir(self, settings_file, tmp_path):
        config = ConfigLoader.load("settings.yaml", base_dir=str(tmp_path))

        assert config["logging"]["level"] == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert ConfigLoader.load(str(path)) == {}

    def test_cache_and_reload(self, settings_file):
        """测试缓存与重新加载"""
        first = ConfigLoader.load(str(settings_file))
        settings_file.write_text("lock:\n  queued_ttl: 2d\n", encoding="utf-8")

        assert ConfigLoader.load(str(settings_file)) is first
        assert str(settings_file) in ConfigLoader.get_cached_paths()

        reloaded = ConfigLoader.reload(str(settings_file))
        assert reloaded["lock"]["queued_ttl"] == "2d"


class TestLoadYamlConfig:
    """load_yaml_config 测试"""

    def test_build_settings(self, settings_file):
        settings = load_yaml_config(str(settings_file), AppSettings)

        assert settings.lock.parsed_queued_ttl == 86400
        assert settings.lock.parsed_executing_ttl == 600
        assert settings.lock.key_prefix == "svc:lock:"
        assert settings.redis.url == "redis://localhost:6379/1"

    def test_overrides_do_not_touch_cache(self, settings_file):
        """测试覆盖参数不会污染缓存"""
        settings = load_yaml_config(
            str(settings_file),
            AppSettings,
            lock={"executing_ttl": "1h"},
        )

        assert settings.lock.parsed_executing_ttl == 3600
        assert ConfigLoader.load(str(settings_file))["lock"]["executing_ttl"] == "10m"
