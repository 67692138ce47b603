"""Django-on-Docker bootstrap package.

This package scaffolds a Django project, emits the container artifacts it
needs (dependency manifest, Dockerfile, compose file, ``.env``), patches the
generated settings to read those values from the environment, and hands the
result to the container orchestration tool.

Package Structure
-----------------
- `setup/`:
    Console output, translations, tool preflight, virtual environment
    provisioning, subprocess boundary, the CLI runner and the stage
    orchestrator.
- `pipeline/`:
    The stage implementations: project materializer, config emitter,
    settings patcher and runtime launcher.
- `config.py`: Configuration constants (paths, filenames, template values).
- `bootstrap_config.py`: The immutable ``BootstrapConfig`` record.
- `exceptions.py`: Project-specific exception classes.

Examples
--------
>>> import djdock
>>> djdock.__version__
'0.3.0'

"""

__version__ = "0.3.0"
