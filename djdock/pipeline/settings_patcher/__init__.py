"""Settings Patcher: parse-modify-reserialize of the generated settings."""

from .document import SettingsDocument, Span
from .runner import PatchReport, patch_document, patch_settings

__all__ = ["PatchReport", "SettingsDocument", "Span", "patch_document", "patch_settings"]
