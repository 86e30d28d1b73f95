"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

from tezos_gateway.config import AppConfig, load_config

EXAMPLE = Path(__file__).parent.parent / "config.yaml.example"


class TestAppConfig:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.server.port == 3000
        assert cfg.server.response_timeout_s == 30.0
        assert cfg.logging.level == "INFO"
        assert cfg.logging.format == "json"
        assert cfg.cache.dapps_s == 900
        assert cfg.cache.dapp_details_s == 840
        assert cfg.cache.tokens_metadata_s == 86400
        assert cfg.custom_dapps == []

    def test_custom_section(self):
        cfg = AppConfig(cache={"dapps_s": 5})
        assert cfg.cache.dapps_s == 5
        assert cfg.cache.exchange_rates_s == 300


class TestLoadConfig:
    def test_load_example_config(self):
        cfg = load_config(EXAMPLE)
        assert cfg.upstream.bcd_base_url == "https://api.better-call.dev/v1"
        assert cfg.upstream.attempts == 5
        assert cfg.custom_dapps[0]["slug"] == "quipuswap"
        assert cfg.app_versions.min_ios == "1.20.1027"

    def test_load_nonexistent_file_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "missing.yaml")
        assert cfg.redis.url == "redis://localhost:6379/0"

    def test_load_none_returns_defaults(self):
        cfg = load_config(None)
        assert cfg.admin.username == "admin"

    def test_env_override_log_level(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_LOG_LEVEL", "DEBUG")
        cfg = load_config(None)
        assert cfg.logging.level == "DEBUG"

    def test_env_override_secrets(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_THREE_ROUTE_API_AUTH_TOKEN", "s3cret")
        monkeypatch.setenv("GATEWAY_ADMIN_PASSWORD", "hunter2")
        cfg = load_config(None)
        assert cfg.upstream.three_route_auth_token == "s3cret"
        assert cfg.admin.password == "hunter2"

    def test_env_override_port_is_coerced(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_PORT", "8080")
        assert load_config(None).server.port == 8080

    def test_env_overrides_yaml_values(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_REDIS_URL", "redis://cache:6379/1")
        cfg = load_config(EXAMPLE)
        assert cfg.redis.url == "redis://cache:6379/1"
        # Non-overridden values preserved
        assert cfg.upstream.http_timeout_s == 15

    def test_empty_env_var_is_ignored(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_LOG_FORMAT", "")
        assert load_config(None).logging.format == "json"

    def test_load_minimal_yaml(self, tmp_path):
        p = tmp_path / "minimal.yaml"
        p.write_text("server:\n  port: 4000\n")
        cfg = load_config(p)
        assert cfg.server.port == 4000
        # Defaults still apply for unspecified sections
        assert cfg.logging.level == "INFO"
