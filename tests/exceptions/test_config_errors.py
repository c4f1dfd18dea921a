"""Tests for the Overtime Insight exception hierarchy."""

from pathlib import Path

import pytest

from overtime_insight.exceptions import (
    ConfigurationError,
    InvalidConfigError,
    InvalidWorkHoursError,
    OvertimeInsightError,
)


class TestOvertimeInsightError:
    """Test the base exception."""

    def test_message_only(self):
        """Without details the string is the message."""
        err = OvertimeInsightError("Something failed")
        assert str(err) == "Something failed"
        assert err.details == {}

    def test_details_in_str(self):
        """Details are appended as key=value pairs."""
        err = OvertimeInsightError("Something failed", details={"month": "2024-03"})
        assert str(err) == "Something failed (month=2024-03)"


class TestConfigurationErrors:
    """Test configuration error subclasses."""

    def test_configuration_error_records_file(self):
        """The offending config file is kept in details."""
        err = ConfigurationError("Bad file", Path("overtime-insight.toml"))
        assert err.config_file == Path("overtime-insight.toml")
        assert err.details == {"config_file": "overtime-insight.toml"}
        assert isinstance(err, OvertimeInsightError)

    def test_invalid_config_error(self):
        """InvalidConfigError keeps key, value and reason."""
        err = InvalidConfigError("OVERTIME_TREND", "maybe", "expected true/false")
        assert err.key == "OVERTIME_TREND"
        assert err.value == "maybe"
        assert err.reason == "expected true/false"
        assert "Invalid configuration for OVERTIME_TREND: maybe" in str(err)
        assert isinstance(err, ConfigurationError)

    def test_invalid_work_hours_error(self):
        """InvalidWorkHoursError is a ConfigurationError with the raw value."""
        err = InvalidWorkHoursError("18-9", "start hour must be earlier than end hour")
        assert err.value == "18-9"
        assert err.message == "Invalid work hours: '18-9'"
        assert err.details["reason"] == "start hour must be earlier than end hour"

        with pytest.raises(ConfigurationError):
            raise err
