from tmi_events import constants
from tmi_events.constants import _get_env_bool, _get_env_int, _get_env_str


def test_get_env_int_valid_integer(monkeypatch):
    """Test parsing a valid integer from environment variable."""
    monkeypatch.setenv("TEST_VAR", "123")
    assert _get_env_int("TEST_VAR", 999) == 123


def test_get_env_int_invalid_string(monkeypatch, capsys):
    """Test handling of invalid string value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "abc")
    assert _get_env_int("TEST_VAR", 999) == 999
    assert "Invalid integer value for TEST_VAR='abc'" in capsys.readouterr().out


def test_get_env_int_unset(monkeypatch):
    monkeypatch.delenv("TEST_VAR", raising=False)
    assert _get_env_int("TEST_VAR", 7) == 7


def test_get_env_str(monkeypatch):
    monkeypatch.setenv("TEST_VAR", "  irc.example.com ")
    assert _get_env_str("TEST_VAR", "x") == "irc.example.com"
    monkeypatch.setenv("TEST_VAR", "   ")
    assert _get_env_str("TEST_VAR", "x") == "x"


def test_get_env_bool(monkeypatch):
    for value in ("true", "1", "YES"):
        monkeypatch.setenv("TEST_VAR", value)
        assert _get_env_bool("TEST_VAR", False) is True
    monkeypatch.setenv("TEST_VAR", "off")
    assert _get_env_bool("TEST_VAR", True) is False
    monkeypatch.delenv("TEST_VAR")
    assert _get_env_bool("TEST_VAR", True) is True


def test_default_constants_are_sane():
    assert constants.TMI_HOST
    assert constants.SYNTHETIC_TAG
    assert constants.FAILURE_HISTORY_LIMIT > 0
    assert isinstance(constants.LOG_RAW_LINES, bool)
