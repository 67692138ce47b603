"""Config Emitter: structured models and serializers for the generated files.

Re-exports the artifact records and the ``emit_config`` runner.
"""

from .compose import ComposeSpec, ServiceSpec, build_compose, check_consistency
from .dockerfile import Dockerfile, ImageSpec
from .envfile import EnvFile
from .manifest import DependencyManifest, Requirement, build_manifest
from .runner import EmittedArtifacts, emit_config, verify_artifacts

__all__ = [
    "ComposeSpec",
    "DependencyManifest",
    "Dockerfile",
    "EmittedArtifacts",
    "EnvFile",
    "ImageSpec",
    "Requirement",
    "ServiceSpec",
    "build_compose",
    "build_manifest",
    "check_consistency",
    "emit_config",
    "verify_artifacts",
]
