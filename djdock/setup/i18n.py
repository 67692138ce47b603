"""Internationalization helpers for the bootstrap output.

Provide the operator-facing strings in English and Swedish and the
``translate`` helper used by the orchestrator and stages.

Typical usage::

    from djdock.setup.i18n import translate, LANG

"""

from __future__ import annotations

LANG: str = "en"
TEXTS: dict[str, dict[str, str]] = {
    "en": {
        "welcome": "=== Setting up Django Application with Docker ===",
        "pipeline_title": "Bootstrap pipeline",
        "stage_checking": "Checking for dependencies",
        "stage_provisioning_env": "Setting up a virtual environment",
        "stage_materializing_project": "Initializing Django project",
        "stage_emitting_config": "Generating requirements, Dockerfile, compose and .env files",
        "stage_patching_settings": "Updating settings.py",
        "stage_launching": "Building and running Docker containers",
        "tool_missing": "Error: {tool} is not installed. Please install {tool} and try again.",
        "tools_ok": "All required tools are installed: {tools}.",
        "creating_venv": "Creating a virtual environment in {path}...",
        "venv_activated": "Virtual environment activated.",
        "venv_deactivated": "Virtual environment deactivated.",
        "venv_create_failed": (
            "Error: Failed to create the virtual environment. Ensure that the "
            "'python3-venv' package is installed on your system."
        ),
        "venv_activate_missing": (
            "Error: Virtual environment activation script not found. Please check "
            "if the virtual environment was created properly."
        ),
        "installing_deps": "Installing Django in the virtual environment...",
        "deps_installed": "Django installed successfully in the virtual environment.",
        "project_created": "Django project {name} created.",
        "project_exists": "Django project {name} already exists. Skipping creation.",
        "denylisted_removed": "Removing problematic dependency: {line}",
        "framework_added": "Added missing framework requirement: {line}",
        "artifact_written": "{name} file generated.",
        "settings_updated": "Django settings updated.",
        "settings_unchanged": "Django settings already up to date.",
        "containers_running": "Docker containers are running.",
        "migrations_applied": "Django migrations applied.",
        "creating_superuser": "Creating Django superuser",
        "launch_skipped": "Skipping container launch (--no-launch).",
        "setup_complete": "=== Django Application Setup Complete ===",
        "access_hint": "You can access your application at http://localhost:{port}.",
        "stage_failed": "Stage failed: {stage}",
    },
    "sv": {
        "welcome": "=== Sätter upp Django-applikation med Docker ===",
        "pipeline_title": "Uppstartspipeline",
        "stage_checking": "Kontrollerar beroenden",
        "stage_provisioning_env": "Sätter upp en virtuell miljö",
        "stage_materializing_project": "Initierar Django-projekt",
        "stage_emitting_config": "Genererar requirements, Dockerfile, compose- och .env-filer",
        "stage_patching_settings": "Uppdaterar settings.py",
        "stage_launching": "Bygger och startar Docker-containrar",
        "tool_missing": "Fel: {tool} är inte installerat. Installera {tool} och försök igen.",
        "tools_ok": "Alla nödvändiga verktyg är installerade: {tools}.",
        "creating_venv": "Skapar en virtuell miljö i {path}...",
        "venv_activated": "Virtuell miljö aktiverad.",
        "venv_deactivated": "Virtuell miljö avaktiverad.",
        "venv_create_failed": (
            "Fel: Kunde inte skapa den virtuella miljön. Kontrollera att paketet "
            "'python3-venv' är installerat på systemet."
        ),
        "venv_activate_missing": (
            "Fel: Aktiveringsskriptet för den virtuella miljön saknas. Kontrollera "
            "att miljön skapades korrekt."
        ),
        "installing_deps": "Installerar Django i den virtuella miljön...",
        "deps_installed": "Django installerades i den virtuella miljön.",
        "project_created": "Django-projektet {name} skapades.",
        "project_exists": "Django-projektet {name} finns redan. Hoppar över.",
        "denylisted_removed": "Tar bort problematiskt beroende: {line}",
        "framework_added": "Lade till saknat ramverksberoende: {line}",
        "artifact_written": "{name} genererad.",
        "settings_updated": "Django-inställningarna uppdaterades.",
        "settings_unchanged": "Django-inställningarna är redan uppdaterade.",
        "containers_running": "Docker-containrarna körs.",
        "migrations_applied": "Django-migreringar tillämpade.",
        "creating_superuser": "Skapar Django-superanvändare",
        "launch_skipped": "Hoppar över containerstart (--no-launch).",
        "setup_complete": "=== Uppsättningen av Django-applikationen är klar ===",
        "access_hint": "Applikationen nås på http://localhost:{port}.",
        "stage_failed": "Steget misslyckades: {stage}",
    },
}


def translate(key: str, **kwargs: object) -> str:
    r"""Translate a message key to the current language.

    Returns the key itself when the language or key is missing. Keyword
    arguments are substituted with ``str.format``.

    Parameters
    ----------
    key : str
        The message key.
    **kwargs : object
        Placeholder values for the message.

    Returns
    -------
    str
        The translated, formatted message.

    Examples
    --------
    >>> translate("project_exists", name="demo")
    'Django project demo already exists. Skipping creation.'
    >>> translate("UNKNOWN_KEY")
    'UNKNOWN_KEY'
    """
    text = TEXTS.get(LANG, TEXTS["en"]).get(key, key)
    if kwargs:
        try:
            return text.format(**kwargs)
        except (KeyError, IndexError):
            return text
    return text


_ = translate

__all__ = ["LANG", "TEXTS", "_", "translate"]
