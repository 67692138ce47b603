"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses raised by the bootstrap stages (preflight, venv
provisioning, project generation, artifact emission, settings patching and
the delegated container commands). The orchestrator catches ``AppError``
only; anything else is a programming error and propagates.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'DATA_VALIDATION_ERROR'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    transient : bool, optional
        Whether the error is temporary and may be retried.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    transient : bool
        True if the error is transient.
    exit_code : int
        Process exit status used by the command-line runner.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> str(e)
    'CODE: message'
    """

    __slots__ = ("code", "message", "context", "transient")

    exit_code: int = 1

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, context=context, transient=False
        )


class DataValidationError(AppError):
    """Raised when a generated artifact would violate one of its invariants."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "DATA_VALIDATION_ERROR", message, context=context, transient=False
        )


class PreflightMissingToolError(AppError):
    """Raised when one or more required external commands are not on PATH."""

    def __init__(self, missing: Sequence[str]) -> None:
        names = ", ".join(missing)
        super().__init__(
            "PREFLIGHT_MISSING_TOOL",
            f"Required tools are not installed: {names}.",
            context={"missing": list(missing)},
        )
        self.missing = list(missing)


class EnvironmentCreationError(AppError):
    """Raised when the isolated dependency environment cannot be created."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ENVIRONMENT_CREATION_FAILED", message, context=context)


class EnvironmentActivationError(AppError):
    """Raised when a created environment has no activation entry point."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ENVIRONMENT_ACTIVATION_MISSING", message, context=context)


class DependencyInstallError(AppError):
    """Raised when framework packages cannot be installed into the environment."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DEPENDENCY_INSTALL_FAILED", message, context=context)


class GeneratorInvocationError(AppError):
    """Raised when the project generator exits non-zero or produces nothing."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("GENERATOR_INVOCATION_FAILED", message, context=context)


class SettingsPatchError(AppError):
    """Raised when the generated settings file cannot be patched."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("SETTINGS_PATCH_FAILED", message, context=context)


class DelegatedCommandError(AppError):
    """Raised for a non-zero exit from a delegated external command.

    Parameters
    ----------
    message : str
        Stage-specific description of what failed.
    returncode : int
        Exit status reported by the external command.
    command : Sequence[str] | None, optional
        The argument vector that was executed.
    """

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        command: Sequence[str] | None = None,
    ) -> None:
        super().__init__(
            "DELEGATED_COMMAND_FAILED",
            message,
            context={"returncode": returncode, "command": list(command or [])},
        )
        self.returncode = returncode


class InteractiveInputAborted(AppError):
    """Raised when the operator interrupts an interactive delegated command."""

    exit_code = 130

    def __init__(self, message: str) -> None:
        super().__init__("INTERACTIVE_INPUT_ABORTED", message)
