"""Tests for the runtime launcher delegating to docker-compose."""

from pathlib import Path

import pytest

from djdock.exceptions import DelegatedCommandError, InteractiveInputAborted
from djdock.pipeline import launcher

COMPOSE = ("docker-compose",)


def test_launch_order_and_cwd(fake_runner, tmp_path: Path):
    launcher.launch(tmp_path, COMPOSE, {"PATH": "/usr/bin"})
    assert fake_runner.commands() == [
        "docker-compose up --build -d",
        "docker-compose run --rm web python manage.py migrate",
        "docker-compose run web python manage.py createsuperuser",
    ]
    assert all(call["cwd"] == tmp_path for call in fake_runner.calls)
    # Only the interactive step inherits the terminal
    assert [call["capture"] for call in fake_runner.calls] == [True, True, False]


@pytest.mark.parametrize(
    "needle, message, ran",
    [
        ("up --build", "Failed to build and run Docker containers.", 1),
        ("migrate", "Failed to apply Django migrations.", 2),
        ("createsuperuser", "Failed to create Django superuser.", 3),
    ],
)
def test_each_step_aborts_with_its_message(fake_runner, tmp_path: Path, needle, message, ran):
    fake_runner.returncodes[needle] = 2
    with pytest.raises(DelegatedCommandError) as excinfo:
        launcher.launch(tmp_path, COMPOSE)
    assert excinfo.value.message == message
    assert excinfo.value.returncode == 2
    assert len(fake_runner.calls) == ran


def test_interrupt_during_superuser(monkeypatch, tmp_path: Path):
    def interrupted(args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr("djdock.setup.commands.run_command", interrupted)
    with pytest.raises(InteractiveInputAborted) as excinfo:
        launcher.create_superuser(tmp_path, COMPOSE)
    assert excinfo.value.exit_code == 130
