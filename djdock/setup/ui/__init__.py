"""Terminal UI primitives for the bootstrap output.

Re-exports the rendering helpers from ``basic.py`` so stages can write
``from djdock.setup.ui import ui_info``.
"""

from djdock.setup.ui.basic import (
    ui_error,
    ui_header,
    ui_info,
    ui_rule,
    ui_success,
    ui_warning,
)

__all__ = [
    "ui_error",
    "ui_header",
    "ui_info",
    "ui_rule",
    "ui_success",
    "ui_warning",
]
