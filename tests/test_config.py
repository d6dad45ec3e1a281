import pytest

from slack_thread_relay.config import DEFAULT_API_URL, RelayConfig
from slack_thread_relay.errors import ConfigError


def test_from_env_minimal():
    config = RelayConfig.from_env({"SLACK_APP_TOKEN": "xapp-1", "SLACK_OAUTH_TOKEN": "xoxb-1"})
    assert config.app_token == "xapp-1"
    assert config.bot_token == "xoxb-1"
    assert config.api_base_url == DEFAULT_API_URL
    assert config.debug_reconnects is False
    assert config.log_level == "INFO"


def test_from_env_optional_settings():
    config = RelayConfig.from_env({
        "SLACK_APP_TOKEN": "xapp-1",
        "SLACK_OAUTH_TOKEN": "xoxb-1",
        "SLACK_API_URL": "http://localhost:8080/api",
        "RELAY_DEBUG_RECONNECTS": "true",
        "RELAY_LOG_LEVEL": "debug",
    })
    assert config.api_base_url == "http://localhost:8080/api"
    assert config.debug_reconnects is True
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("missing", ["SLACK_APP_TOKEN", "SLACK_OAUTH_TOKEN"])
def test_missing_token_fails_fast(missing):
    env = {"SLACK_APP_TOKEN": "xapp-1", "SLACK_OAUTH_TOKEN": "xoxb-1"}
    del env[missing]
    with pytest.raises(ConfigError, match=f"{missing} is not given"):
        RelayConfig.from_env(env)


def test_blank_token_counts_as_missing():
    with pytest.raises(ConfigError):
        RelayConfig.from_env({"SLACK_APP_TOKEN": "  ", "SLACK_OAUTH_TOKEN": "xoxb-1"})


def test_unknown_log_level_is_a_config_error():
    with pytest.raises(ConfigError, match="unknown log level"):
        RelayConfig.from_env({"SLACK_APP_TOKEN": "xapp-1", "SLACK_OAUTH_TOKEN": "xoxb-1", "RELAY_LOG_LEVEL": "verbose"})


def test_log_level_is_normalized():
    assert RelayConfig(app_token="xapp-1", bot_token="xoxb-1", log_level=" warning ").log_level == "WARNING"
