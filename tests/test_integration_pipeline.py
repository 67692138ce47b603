"""End-to-end pipeline runs with fake external tools.

Covers the full ``my_docker_django_app`` scenario, re-running against a
completed state, and the missing-tool scenario that must leave the base
directory untouched.
"""

import ast
import os
from pathlib import Path

import yaml

from djdock import config as constants
from djdock.pipeline.config_emitter import verify_artifacts
from djdock.setup import app_runner
from djdock.setup.pipeline import Stage, run_pipeline


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


def _databases_blocks(settings_text: str) -> int:
    return sum(
        1
        for node in ast.parse(settings_text).body
        if isinstance(node, ast.Assign)
        and any(isinstance(t, ast.Name) and t.id == "DATABASES" for t in node.targets)
    )


def test_full_run_produces_expected_project(
    all_tools, fake_venv, fake_runner, tmp_path: Path, cfg
):
    cwd_before = os.getcwd()
    result = run_pipeline(tmp_path, cfg)
    assert result.stage is Stage.DONE
    assert os.getcwd() == cwd_before

    project = tmp_path / "my_docker_django_app"
    assert result.project_dir == project.resolve()
    assert "EXPOSE 8000" in (project / "Dockerfile").read_text(encoding="utf-8").splitlines()

    compose = yaml.safe_load((project / "docker-compose.yml").read_text(encoding="utf-8"))
    assert set(compose["services"]) == {"db", "web"}
    assert compose["services"]["web"]["depends_on"] == ["db"]

    env_lines = (project / ".env").read_text(encoding="utf-8").splitlines()
    assert [line.split("=", 1)[0] for line in env_lines] == list(constants.REQUIRED_ENV_KEYS)

    requirements = (project / "requirements.txt").read_text(encoding="utf-8")
    assert "bcc==0.29.1" not in requirements

    settings = (project / "my_docker_django_app" / "settings.py").read_text(encoding="utf-8")
    assert _databases_blocks(settings) == 1
    verify_artifacts(project, cfg)

    commands = fake_runner.commands()
    assert commands[-3:] == [
        "docker-compose up --build -d",
        "docker-compose run --rm web python manage.py migrate",
        "docker-compose run web python manage.py createsuperuser",
    ]
    assert all(call["cwd"] == project.resolve() for call in fake_runner.calls[-3:])


def test_second_run_is_idempotent(all_tools, fake_venv, fake_runner, tmp_path: Path, cfg):
    assert run_pipeline(tmp_path, cfg, launch=False).ok
    first = _snapshot(tmp_path / "my_docker_django_app")

    assert run_pipeline(tmp_path, cfg, launch=False).ok
    second = _snapshot(tmp_path / "my_docker_django_app")

    assert first == second
    assert sum("startproject" in c for c in fake_runner.commands()) == 1
    settings = second["my_docker_django_app/settings.py"].decode("utf-8")
    assert settings.count(constants.DATABASES_MARKER) == 1
    assert b"bcc==0.29.1" not in second["requirements.txt"]


def test_existing_project_directory_is_reused(
    all_tools, fake_venv, fake_runner, tmp_path: Path, cfg
):
    from conftest import make_django_project

    make_django_project(tmp_path, cfg.project_name)
    assert run_pipeline(tmp_path, cfg, launch=False).ok
    assert not any("startproject" in c for c in fake_runner.commands())


def test_missing_tool_leaves_base_unchanged(
    monkeypatch, fake_venv, fake_runner, tmp_path: Path, capsys
):
    (tmp_path / "notes.txt").write_text("pre-existing\n")
    before = _snapshot(tmp_path)
    monkeypatch.setattr(
        "djdock.setup.preflight.shutil.which",
        lambda name, *a, **k: None if name == "docker-compose" else f"/usr/bin/{name}",
    )

    code = app_runner.run(app_runner.parse_cli_args(["--base-dir", str(tmp_path)]))

    assert code == 1
    assert _snapshot(tmp_path) == before
    assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.txt"]
    assert fake_runner.calls == []
    assert "Error: docker-compose is not installed" in capsys.readouterr().out


def test_failed_launch_keeps_artifacts(all_tools, fake_venv, fake_runner, tmp_path: Path, cfg):
    fake_runner.returncodes["manage.py migrate"] = 1
    result = run_pipeline(tmp_path, cfg)
    assert result.failed_stage is Stage.LAUNCHING
    assert result.error.message == "Failed to apply Django migrations."
    assert (tmp_path / "my_docker_django_app" / "docker-compose.yml").is_file()
    assert not any("createsuperuser" in c for c in fake_runner.commands())
