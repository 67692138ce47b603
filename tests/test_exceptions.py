"""Tests for the ``AppError`` hierarchy."""

from djdock.exceptions import (
    AppError,
    DataValidationError,
    DelegatedCommandError,
    InteractiveInputAborted,
    PreflightMissingToolError,
)


def test_str_and_to_dict():
    err = DataValidationError("bad manifest", context={"entries": ["bcc==0.29.1"]})
    assert str(err) == "DATA_VALIDATION_ERROR: bad manifest"
    assert err.to_dict() == {
        "error_code": "DATA_VALIDATION_ERROR",
        "message": "bad manifest",
        "context": {"entries": ["bcc==0.29.1"]},
        "is_transient": False,
    }


def test_exit_codes():
    assert PreflightMissingToolError(["docker"]).exit_code == 1
    assert DelegatedCommandError("x", returncode=2).exit_code == 1
    assert InteractiveInputAborted("stop").exit_code == 130
    assert issubclass(InteractiveInputAborted, AppError)


def test_delegated_command_context():
    err = DelegatedCommandError("Failed", returncode=4, command=("docker-compose", "up"))
    assert err.returncode == 4
    assert err.context == {"returncode": 4, "command": ["docker-compose", "up"]}
