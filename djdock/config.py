"""Global configuration constants for the project.

Defines paths, filenames and the fixed template values used by the
bootstrap pipeline and the setup utilities.
"""

from __future__ import annotations

from pathlib import Path

# Tool directories (the bootstrapped project lives under a separate base path)
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
LOG_DIR: Path = PROJECT_ROOT / "logs"
BOOTSTRAP_ENV_FILE: Path = PROJECT_ROOT / "bootstrap.env"

# Logging
LOG_FILENAME: str = "bootstrap.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Project scaffolding
DEFAULT_PROJECT_NAME: str = "my_docker_django_app"
DEFAULT_VENV_DIR_NAME: str = ".venv"
REQUIRED_TOOLS: tuple[str, ...] = ("python3", "docker", "docker-compose")
COMPOSE_COMMAND: tuple[str, ...] = ("docker-compose",)
GENERATOR_COMMAND: str = "django-admin"
BOOTSTRAP_PACKAGES: tuple[str, ...] = ("pip", "setuptools", "wheel")
FRAMEWORK_PACKAGES: tuple[str, ...] = ("django", "gunicorn", "psycopg2-binary")

# Dependency manifest
REQUIREMENTS_FILENAME: str = "requirements.txt"
FRAMEWORK_REQUIREMENT: str = "Django"
DEPENDENCY_DENYLIST: tuple[str, ...] = ("bcc==0.29.1",)

# Image build file
DOCKERFILE_FILENAME: str = "Dockerfile"
DEFAULT_BASE_IMAGE: str = "python:3.13-slim"
DEFAULT_WORKDIR: str = "/app"
DEFAULT_APP_USER: str = "appuser"
DEFAULT_PORT: int = 8000
DEFAULT_WORKERS: int = 3
DEFAULT_BIND_HOST: str = "0.0.0.0"
IMAGE_ENVIRONMENT: tuple[tuple[str, str], ...] = (
    ("PYTHONDONTWRITEBYTECODE", "1"),
    ("PYTHONUNBUFFERED", "1"),
)

# Orchestration file
COMPOSE_FILENAME: str = "docker-compose.yml"
COMPOSE_FILE_VERSION: str = "3.8"
DB_SERVICE_NAME: str = "db"
WEB_SERVICE_NAME: str = "web"
DEFAULT_DB_IMAGE: str = "postgres:14"
DB_PORT: int = 5432
DB_VOLUME_NAME: str = "postgres_data"
DB_DATA_PATH: str = "/var/lib/postgresql/data"
WEB_CONTAINER_NAME: str = "django-docker"

# Environment file
ENV_FILENAME: str = ".env"
DEFAULT_SECRET_KEY: str = "your_secret_key"
DEFAULT_ENV_VALUES: tuple[tuple[str, str], ...] = (
    ("DJANGO_SECRET_KEY", DEFAULT_SECRET_KEY),
    ("DEBUG", "True"),
    ("DATABASE_ENGINE", "django.db.backends.postgresql"),
    ("DATABASE_NAME", "dockerdjango"),
    ("DATABASE_USERNAME", "dbuser"),
    ("DATABASE_PASSWORD", "dbpassword"),
    ("DATABASE_HOST", "db"),
    ("DATABASE_PORT", "5432"),
)
REQUIRED_ENV_KEYS: tuple[str, ...] = tuple(key for key, _ in DEFAULT_ENV_VALUES)

# Settings patch
SETTINGS_FILENAME: str = "settings.py"
SECRET_KEY_FALLBACK: str = "fallback_secret_key"
DEBUG_FALLBACK: str = "True"
DATABASES_MARKER: str = "# djdock: database settings from environment"
DATABASE_DEFAULTS: tuple[tuple[str, str, str], ...] = (
    ("ENGINE", "DATABASE_ENGINE", "django.db.backends.sqlite3"),
    ("NAME", "DATABASE_NAME", "db.sqlite3"),
    ("USER", "DATABASE_USERNAME", "user"),
    ("PASSWORD", "DATABASE_PASSWORD", ""),
    ("HOST", "DATABASE_HOST", "localhost"),
    ("PORT", "DATABASE_PORT", ""),
)

# Runtime launcher
MANAGE_SCRIPT: str = "manage.py"
