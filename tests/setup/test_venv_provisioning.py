"""Tests for ``djdock.setup.venv_manager`` (create, verify, install)."""

import subprocess
from pathlib import Path

import pytest

import djdock.setup.venv_manager as vm
from djdock.exceptions import (
    DependencyInstallError,
    EnvironmentActivationError,
    EnvironmentCreationError,
)
from djdock.setup.venv import ActiveEnvironment

from conftest import FakeRunner, fake_venv_create


def test_creates_environment_once(monkeypatch, tmp_path: Path):
    created = []

    def create(env_dir, with_pip=True):
        created.append(Path(env_dir))
        fake_venv_create(env_dir)

    monkeypatch.setattr(vm.venv, "create", create)
    venv_dir = tmp_path / ".venv"
    activate = vm.ensure_virtual_environment(venv_dir, tmp_path)
    assert activate.is_file()
    vm.ensure_virtual_environment(venv_dir, tmp_path)
    assert created == [venv_dir]


def test_creation_failure_deletes_and_fails(monkeypatch, tmp_path: Path, capsys):
    def create(env_dir, with_pip=True):
        Path(env_dir, "bin").mkdir(parents=True)
        raise subprocess.CalledProcessError(1, ["ensurepip"])

    monkeypatch.setattr(vm.venv, "create", create)
    venv_dir = tmp_path / ".venv"
    with pytest.raises(EnvironmentCreationError):
        vm.ensure_virtual_environment(venv_dir, tmp_path)
    assert not venv_dir.exists()
    assert "python3-venv" in capsys.readouterr().out


def test_missing_activation_script_deletes_and_fails(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(
        vm.venv, "create", lambda env_dir, with_pip=True: Path(env_dir, "bin").mkdir(parents=True)
    )
    venv_dir = tmp_path / ".venv"
    with pytest.raises(EnvironmentActivationError) as excinfo:
        vm.ensure_virtual_environment(venv_dir, tmp_path)
    assert excinfo.value.context["listing"] == ["bin"]
    assert not venv_dir.exists()


def test_preexisting_broken_environment_is_removed(tmp_path: Path):
    venv_dir = tmp_path / ".venv"
    venv_dir.mkdir()
    (tmp_path / "keep.txt").write_text("x")
    with pytest.raises(EnvironmentActivationError):
        vm.ensure_virtual_environment(venv_dir, tmp_path)
    assert not venv_dir.exists()
    assert (tmp_path / "keep.txt").exists()


def test_install_runs_pip_twice(monkeypatch, tmp_path: Path):
    fake_venv_create(tmp_path / ".venv")
    runner = FakeRunner()
    monkeypatch.setattr(vm.commands, "run_command", runner)
    active = ActiveEnvironment.activate(tmp_path / ".venv", {"PATH": "/usr/bin"})
    vm.install_framework_packages(active, ("django", "gunicorn"), cwd=tmp_path)
    first, second = runner.calls
    assert first["args"][1:5] == ["-m", "pip", "install", "--upgrade"]
    assert "django" in second["args"] and "gunicorn" in second["args"]


def test_install_failure_raises(monkeypatch, tmp_path: Path):
    fake_venv_create(tmp_path / ".venv")
    runner = FakeRunner(returncodes={"django": 1})
    monkeypatch.setattr(vm.commands, "run_command", runner)
    active = ActiveEnvironment.activate(tmp_path / ".venv", {})
    with pytest.raises(DependencyInstallError) as excinfo:
        vm.install_framework_packages(active, ("django",), cwd=tmp_path)
    assert excinfo.value.context["returncode"] == 1


def test_install_requires_generator(monkeypatch, tmp_path: Path):
    venv_dir = tmp_path / ".venv"
    fake_venv_create(venv_dir)
    for script in venv_dir.rglob("django-admin*"):
        script.unlink()
    monkeypatch.setattr(vm.commands, "run_command", FakeRunner())
    active = ActiveEnvironment.activate(venv_dir, {})
    with pytest.raises(DependencyInstallError, match="django-admin"):
        vm.install_framework_packages(active, ("django",), cwd=tmp_path)


def test_provisioned_environment_context(fake_venv, fake_runner, tmp_path: Path, cfg, capsys):
    with vm.provisioned_environment(tmp_path, cfg, {"PATH": "/usr/bin"}) as active:
        assert active.venv_dir == tmp_path / ".venv"
        assert active.environ["VIRTUAL_ENV"] == str(tmp_path / ".venv")
    out = capsys.readouterr().out
    assert "Virtual environment activated." in out
    assert "Virtual environment deactivated." in out
