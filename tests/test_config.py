"""Tests for configuration loading and validation."""

import warnings

import pytest
from pydantic import ValidationError

from check_notifier.config import (
    ConfigurationError,
    TransportMethod,
    apply_environment_overrides,
    config_from_dict,
    load_config,
)


@pytest.fixture
def host_config():
    """Host configuration dict shaped like the documented YAML."""
    return {
        "url": "http://localhost:8082/",
        "plugins": ["./plugins/email"],
        "email": {
            "method": "smtp",
            "transport": {"service": "Gmail", "auth": {"user": "foobar@gmail.com", "pass": "secret"}},
            "event": {"up": True, "down": True, "paused": False, "restarted": False},
            "message": {
                "from": "Fred Foo <foo@blurdybloop.com>",
                "to": "bar@blurdybloop.com, baz@blurdybloop.com",
            },
        },
    }


CONFIG_YAML = """
url: http://localhost:8082
email:
  method: Sendmail
  event:
    down: true
  message:
    from: ops@blurdybloop.com
    to: oncall@blurdybloop.com
logging:
  level: DEBUG
  format: json
"""


class TestConfigFromDict:
    def test_valid_config(self, host_config):
        config = config_from_dict(host_config, environ={})
        notification = config.notification

        assert notification.method == TransportMethod.SMTP
        assert notification.url == "http://localhost:8082"
        assert notification.event["down"] is True
        assert notification.enabled_events() == ["up", "down"]
        assert notification.message.from_address == "Fred Foo <foo@blurdybloop.com>"
        assert notification.message.to == "bar@blurdybloop.com, baz@blurdybloop.com"
        assert notification.transport["service"] == "Gmail"
        assert config.logging.level == "INFO"

    def test_config_is_frozen(self, host_config):
        config = config_from_dict(host_config, environ={})

        with pytest.raises(ValidationError):
            config.notification.url = "http://elsewhere"

    def test_missing_email_section(self):
        with pytest.raises(ConfigurationError, match="Missing 'email' section"):
            config_from_dict({"url": "http://localhost"}, environ={})

    def test_missing_message(self, host_config):
        del host_config["email"]["message"]

        with pytest.raises(ConfigurationError) as exc_info:
            config_from_dict(host_config, environ={})

        assert "Missing required field: email -> message" in exc_info.value.errors

    def test_invalid_default_recipient(self, host_config):
        host_config["email"]["message"]["to"] = "bar@blurdybloop.com, not-an-email"

        with pytest.raises(ConfigurationError) as exc_info:
            config_from_dict(host_config, environ={})

        assert any("message -> to" in error for error in exc_info.value.errors)

    def test_unknown_method(self, host_config):
        host_config["email"]["method"] = "carrier-pigeon"

        with pytest.raises(ConfigurationError) as exc_info:
            config_from_dict(host_config, environ={})

        assert any("email -> method" in error for error in exc_info.value.errors)

    def test_missing_event_map_disables_everything(self, host_config):
        del host_config["email"]["event"]

        with pytest.warns(UserWarning, match="No event kinds are enabled"):
            config = config_from_dict(host_config, environ={})

        assert config.notification.enabled_events() == []

    def test_unknown_event_kind_warns(self, host_config):
        host_config["email"]["event"]["flapping"] = True

        with pytest.warns(UserWarning, match="flapping"):
            config_from_dict(host_config, environ={})

    def test_kind_with_custom_template_does_not_warn(self, host_config, tmp_path):
        (tmp_path / "flapping.txt").write_text("[Flapping] {{ check.name }}\n")
        host_config["email"]["event"]["flapping"] = True
        host_config["email"]["template_dir"] = str(tmp_path)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            config = config_from_dict(host_config, environ={})

        assert config.notification.template_dir == str(tmp_path)
        assert not any("template" in str(w.message) for w in caught)

    def test_disabled_kind_without_template_does_not_warn(self, host_config):
        host_config["email"]["event"]["flapping"] = False

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            config_from_dict(host_config, environ={})

        assert not any("flapping" in str(w.message) for w in caught)

    @pytest.mark.parametrize("recipient", ["root@localhost", "ops@host.local", "ops@example.test"])
    def test_sendmail_with_local_recipient(self, host_config, recipient):
        host_config["email"]["method"] = "Sendmail"
        host_config["email"]["transport"] = {}
        host_config["email"]["message"] = {"from": "uptime@blurdybloop.com", "to": recipient}

        config = config_from_dict(host_config, environ={})

        assert config.notification.method == TransportMethod.SENDMAIL
        assert config.notification.message.to == recipient

    def test_environment_overrides_transport(self, host_config):
        config = config_from_dict(
            host_config,
            environ={"SMTP_HOST": "mail.internal", "SMTP_PORT": "2525"},
        )

        assert config.notification.transport["host"] == "mail.internal"
        assert config.notification.transport["port"] == 2525


class TestLoadConfig:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        config = load_config(path, environ={})

        assert config.notification.method == TransportMethod.SENDMAIL
        assert config.notification.enabled_events() == ["down"]
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yaml", environ={})

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ConfigurationError, match="empty"):
            load_config(path, environ={})

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("email: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(path, environ={})

    def test_default_location(self, tmp_path, monkeypatch):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text(CONFIG_YAML)
        monkeypatch.chdir(tmp_path)

        config = load_config(environ={})

        assert config.notification.message.to == "oncall@blurdybloop.com"

    def test_no_default_location(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(environ={})

        assert "Tried: config.yaml" in exc_info.value.errors


class TestEnvironmentOverrides:
    def test_no_overrides_copies_transport(self):
        transport = {"host": "a"}

        merged = apply_environment_overrides(transport, environ={})

        assert merged == {"host": "a"}
        assert merged is not transport

    def test_invalid_port(self):
        with pytest.raises(ConfigurationError, match="Must be a valid integer"):
            apply_environment_overrides({}, environ={"SMTP_PORT": "smtp"})

    def test_port_out_of_range(self):
        with pytest.raises(ConfigurationError, match="between 1 and 65535"):
            apply_environment_overrides({"port": 70000}, environ={})

    def test_user_without_password(self):
        with pytest.raises(ConfigurationError, match="password is not"):
            apply_environment_overrides({}, environ={"SMTP_USER": "me"})

    def test_credentials_from_environment(self):
        merged = apply_environment_overrides(
            {"host": "a"}, environ={"SMTP_USER": "me", "SMTP_PASS": "secret"}
        )

        assert (merged["user"], merged["pass"]) == ("me", "secret")
