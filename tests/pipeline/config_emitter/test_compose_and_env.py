"""Tests for the orchestration file, the env file and their consistency."""

import pytest
import yaml

from djdock import config as constants
from djdock.bootstrap_config import BootstrapConfig
from djdock.exceptions import DataValidationError
from djdock.pipeline.config_emitter.compose import (
    ComposeSpec,
    ServiceSpec,
    build_compose,
    check_consistency,
    referenced_variables,
)
from djdock.pipeline.config_emitter.envfile import EnvFile


def test_compose_services_and_dependency():
    data = yaml.safe_load(build_compose(BootstrapConfig()).render())
    assert data["version"] == "3.8"
    assert list(data["services"]) == ["db", "web"]
    web = data["services"]["web"]
    assert web["depends_on"] == ["db"]
    assert web["ports"] == ["8000:8000"]
    assert web["build"] == {"context": "."}
    assert web["environment"]["DATABASE_HOST"] == "db"
    assert data["services"]["db"]["volumes"] == ["postgres_data:/var/lib/postgresql/data"]
    assert data["volumes"] == {"postgres_data": None}


def test_volume_rendered_without_null():
    text = build_compose(BootstrapConfig()).render()
    assert "  postgres_data:\n" in text
    assert "null" not in text


def test_referenced_variables_covered_by_default_env():
    compose = build_compose(BootstrapConfig())
    env = EnvFile(BootstrapConfig().env_values())
    assert compose.referenced_variables() <= set(env.keys())
    check_consistency(compose, env)


@pytest.mark.parametrize("dropped", list(constants.REQUIRED_ENV_KEYS))
def test_consistency_detects_missing_variable(dropped):
    compose = build_compose(BootstrapConfig())
    env = EnvFile(tuple(kv for kv in BootstrapConfig().env_values() if kv[0] != dropped))
    if dropped in compose.referenced_variables():
        with pytest.raises(DataValidationError) as excinfo:
            check_consistency(compose, env)
        assert dropped in excinfo.value.context["missing"]
    else:
        check_consistency(compose, env)


def test_referenced_variables_handles_defaults_and_nesting():
    assert referenced_variables({"a": ["${X}", {"b": "${Y:-1} ${Z?err}"}], "c": 3}) == {
        "X",
        "Y",
        "Z",
    }


def test_service_lookup():
    spec = ComposeSpec((ServiceSpec(name="db", image="postgres:14"),), version=None)
    assert spec.service("db").image == "postgres:14"
    assert "version" not in spec.to_dict()
    with pytest.raises(KeyError):
        spec.service("web")


def test_env_file_render_and_load(tmp_path):
    env = EnvFile(BootstrapConfig().env_values())
    path = tmp_path / ".env"
    path.write_text(env.render(), encoding="utf-8")
    assert path.read_text(encoding="utf-8").splitlines()[0] == "DJANGO_SECRET_KEY=your_secret_key"
    loaded = EnvFile.load(path)
    assert loaded == env
    assert loaded.missing(constants.REQUIRED_ENV_KEYS) == []
    assert EnvFile.load(tmp_path / "absent").keys() == ()


@pytest.mark.parametrize(
    "entries",
    [
        (("1BAD", "x"),),
        (("A", "1"), ("A", "2")),
        (("A", "line\nbreak"),),
    ],
)
def test_env_file_rejects_invalid_entries(entries):
    with pytest.raises(DataValidationError):
        EnvFile(entries)


def test_env_file_require():
    with pytest.raises(DataValidationError, match="DEBUG"):
        EnvFile((("DJANGO_SECRET_KEY", "x"),)).require(["DJANGO_SECRET_KEY", "DEBUG"])
