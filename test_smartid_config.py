"""
Configuration loading tests
"""

import dataclasses
import logging

import pytest
import yaml

from smartid.core.config import Settings, load_settings
from smartid.models.models import TrustedIssuer


class TestSettings:
    """Test Settings construction from mappings"""

    def test_from_mapping(self, settings):
        assert settings.relying_party_uuid == "00000000-0000-0000-0000-000000000000"
        assert settings.relying_party_name == "DEMO"
        assert settings.authorize_token == "test-token"
        assert settings.hostname == "sid.demo.sk.ee"
        assert settings.port == 443
        assert settings.api_path == "/smart-id-rp/v1"
        assert settings.log_level == "DEBUG"
        assert settings.base_url == "https://sid.demo.sk.ee:443/smart-id-rp/v1"
        assert len(settings.trusted_issuers) == 2
        assert settings.trusted_issuers[1] == TrustedIssuer.from_mapping({
            "C": "EE", "O": "SK ID Solutions AS", "OID": "NTREE-10747013", "CN": "ESTEID2018",
        })

    def test_host_with_port(self, settings_data):
        """Test host:port is split and the port wins over the default"""
        settings_data["api"]["hostname"] = "localhost:8443"
        settings = Settings.from_mapping(settings_data)
        assert settings.hostname == "localhost"
        assert settings.port == 8443

    def test_explicit_port(self, settings_data):
        settings_data["api"]["port"] = 9443
        assert Settings.from_mapping(settings_data).port == 9443

    def test_trailing_slash_stripped(self, settings_data):
        settings_data["api"]["path"] = "/smart-id-rp/v1/"
        assert Settings.from_mapping(settings_data).api_path == "/smart-id-rp/v1"

    def test_defaults(self):
        """Test an empty mapping falls back to the demo endpoint"""
        settings = Settings.from_mapping({})
        assert settings.hostname == "sid.demo.sk.ee"
        assert settings.port == 443
        assert settings.trusted_issuers == ()
        assert settings.log_level == "INFO"
        assert settings.request_timeout == 10.0

    def test_immutable(self, settings):
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.authorize_token = "other"

    def test_unquoted_yaml_boolean_rejected(self):
        """Test `C: NO` (a YAML boolean) is refused instead of becoming the text False"""
        data = yaml.safe_load("trusted_issuers:\n  - {C: NO, O: \"Norsk CA\", CN: \"ROOT\"}\n")
        with pytest.raises(ValueError, match="'C'"):
            Settings.from_mapping(data)

    def test_non_string_issuer_value_rejected(self):
        with pytest.raises(ValueError):
            TrustedIssuer.from_mapping({"C": "EE", "OID": 10747013})


@pytest.mark.usefixtures("smartid_logger")
class TestLoadSettings:
    """Test YAML loading"""

    def test_load_explicit_path(self, tmp_path, monkeypatch):
        """Test YAML file with env substitution"""
        monkeypatch.setenv("SMARTID_TEST_TOKEN", "secret-from-env")
        cfg = tmp_path / "smartid.yaml"
        cfg.write_text(
            "relying_party:\n"
            "  uuid: \"11111111-1111-1111-1111-111111111111\"\n"
            "  name: \"ACME\"\n"
            "api:\n"
            "  hostname: \"rp.example.com:8443\"\n"
            "  authorize_token: \"${SMARTID_TEST_TOKEN}\"\n"
            "trusted_issuers:\n"
            "  - {C: \"EE\", O: \"SK ID Solutions AS\", OID: \"NTREE-10747013\", CN: \"ESTEID2018\"}\n"
            "logging:\n"
            "  level: debug\n",
            encoding="utf-8",
        )
        settings = load_settings(str(cfg))

        assert settings.relying_party_name == "ACME"
        assert settings.authorize_token == "secret-from-env"
        assert (settings.hostname, settings.port) == ("rp.example.com", 8443)
        assert settings.api_path == "/smart-id-rp/v1"
        assert settings.log_level == "DEBUG"
        assert settings.trusted_issuers[0].as_dict()["CN"] == "ESTEID2018"
        assert settings.cfg_file_used == str(cfg)

    def test_missing_env_keeps_placeholder(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SMARTID_MISSING_TOKEN", raising=False)
        cfg = tmp_path / "smartid.yaml"
        cfg.write_text("api:\n  authorize_token: \"${SMARTID_MISSING_TOKEN}\"\n", encoding="utf-8")
        assert load_settings(str(cfg)).authorize_token == "${SMARTID_MISSING_TOKEN}"

    def test_env_config(self, tmp_path, monkeypatch):
        cfg = tmp_path / "other.yaml"
        cfg.write_text("relying_party:\n  name: \"FROM-ENV\"\n", encoding="utf-8")
        monkeypatch.setenv("SMARTID_CONFIG", str(cfg))
        assert load_settings().relying_party_name == "FROM-ENV"

    def test_env_config_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SMARTID_CONFIG", str(tmp_path / "nope.yaml"))
        with pytest.raises(FileNotFoundError):
            load_settings()

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_demo_file(self):
        """Test the shipped demo configuration parses"""
        settings = load_settings("smartid.demo.yaml")
        assert settings.relying_party_name == "DEMO"
        assert len(settings.trusted_issuers) == 10

    def test_sets_package_log_level(self, tmp_path, smartid_logger):
        """Test the configured level is applied to the smartid logger on load"""
        cfg = tmp_path / "smartid.yaml"
        cfg.write_text("logging:\n  level: warning\n", encoding="utf-8")
        load_settings(str(cfg))
        assert smartid_logger.level == logging.WARNING
