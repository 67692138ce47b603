"""Pytest configuration and shared fakes.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides a fake ``run_command`` that stands in for ``django-admin``,
  ``pip`` and ``docker-compose`` so no external tool is ever started.
"""

import logging
import os
import signal
import subprocess
import sys
from pathlib import Path

import pytest

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from djdock.bootstrap_config import BootstrapConfig  # noqa: E402

DJANGO_SETTINGS = '''"""
Django settings for {name} project.

Generated by 'django-admin startproject' using Django 5.0.6.
"""

from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = 'django-insecure-abc123'

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = []

ROOT_URLCONF = '{name}.urls'

WSGI_APPLICATION = '{name}.wsgi.application'


# Database
# https://docs.djangoproject.com/en/5.0/ref/settings/#databases

DATABASES = {{
    'default': {{
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }}
}}

STATIC_URL = 'static/'
'''

FREEZE_OUTPUT = "asgiref==3.8.1\nbcc==0.29.1\nDjango==5.0.6\ngunicorn==22.0.0\nsqlparse==0.5.0\n"


def make_django_project(base: Path, name: str) -> Path:
    """Create the tree ``django-admin startproject`` would produce."""
    project_dir = base / name
    package = project_dir / name
    package.mkdir(parents=True)
    (project_dir / "manage.py").write_text("#!/usr/bin/env python\n", encoding="utf-8")
    (package / "__init__.py").write_text("", encoding="utf-8")
    (package / "settings.py").write_text(DJANGO_SETTINGS.format(name=name), encoding="utf-8")
    (package / "wsgi.py").write_text("application = None\n", encoding="utf-8")
    return project_dir


class FakeRunner:
    """Records delegated commands and answers them like the real tools.

    ``returncodes`` maps a substring of the joined command line to the exit
    status to report for it.
    """

    def __init__(self, freeze_output=FREEZE_OUTPUT, returncodes=None, version="5.0.6"):
        self.calls = []
        self.freeze_output = freeze_output
        self.returncodes = dict(returncodes or {})
        self.version = version

    def commands(self):
        return [" ".join(str(a) for a in call["args"]) for call in self.calls]

    def __call__(self, args, *, cwd, env=None, capture=True, timeout=None):
        argv = [str(a) for a in args]
        line = " ".join(argv)
        self.calls.append({"args": argv, "cwd": Path(cwd), "capture": capture})
        for needle, code in self.returncodes.items():
            if needle in line:
                return subprocess.CompletedProcess(argv, code, "", f"{needle} failed")
        stdout = ""
        if "startproject" in argv:
            make_django_project(Path(cwd), argv[-1])
        elif argv[-1] == "freeze":
            stdout = self.freeze_output
        elif argv[-1] == "--version":
            stdout = self.version + "\n"
        return subprocess.CompletedProcess(argv, 0, stdout, "")


def fake_venv_create(env_dir, with_pip=True, **kwargs):
    """Stand-in for ``venv.create`` producing the files the provisioner checks."""
    bin_dir = Path(env_dir) / ("Scripts" if sys.platform == "win32" else "bin")
    bin_dir.mkdir(parents=True)
    suffix = ".exe" if sys.platform == "win32" else ""
    activate = "activate.bat" if sys.platform == "win32" else "activate"
    for name in (activate, f"python{suffix}", f"django-admin{suffix}"):
        (bin_dir / name).write_text("", encoding="utf-8")


@pytest.fixture
def fake_runner(monkeypatch):
    """Replace ``run_command`` everywhere with a recording ``FakeRunner``."""
    runner = FakeRunner()
    monkeypatch.setattr("djdock.setup.commands.run_command", runner)
    return runner


@pytest.fixture
def fake_venv(monkeypatch):
    import djdock.setup.venv_manager as vm

    monkeypatch.setattr(vm.venv, "create", fake_venv_create)
    return fake_venv_create


@pytest.fixture
def all_tools(monkeypatch):
    """Pretend every external tool is installed."""
    monkeypatch.setattr(
        "djdock.setup.preflight.shutil.which", lambda name, *a, **k: f"/usr/bin/{name}"
    )


@pytest.fixture
def cfg():
    return BootstrapConfig()


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    """Disable Rich styling so output assertions see plain text."""
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo ``configure_logging`` so handlers never outlive a test's streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


_TEST_TIMEOUT = int(os.environ.get("PYTEST_TEST_TIMEOUT", "10"))


def _timeout_handler(signum, frame):
    """Test Timeout handler."""
    raise TimeoutError(f"Test exceeded {_TEST_TIMEOUT} seconds timeout")


def pytest_runtest_setup(item):
    """Test Pytest runtest setup."""
    if hasattr(signal, "SIGALRM"):
        signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(_TEST_TIMEOUT)


def pytest_runtest_teardown(item, nextitem):
    """Test Pytest runtest teardown."""
    if hasattr(signal, "SIGALRM"):
        signal.alarm(0)
