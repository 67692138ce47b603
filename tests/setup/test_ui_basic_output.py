"""Plain-output behaviour of the ``ui_*`` primitives."""

from djdock.setup.ui import basic


def test_rule_and_messages_plain(capsys):
    basic.ui_rule("Checking for dependencies")
    basic.ui_info("info line")
    basic.ui_success("done")
    basic.ui_warning("careful")
    out = capsys.readouterr().out
    assert "==> Checking for dependencies" in out
    assert "info line" in out and "done" in out and "careful" in out


def test_error_adds_label_once(capsys):
    basic.ui_error("Failed to apply Django migrations.")
    basic.ui_error("Error: docker is not installed.")
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "Error: Failed to apply Django migrations.",
        "Error: docker is not installed.",
    ]


def test_styled_output_when_terminal(monkeypatch, capsys):
    monkeypatch.setattr(basic, "ui_has_rich", lambda: True)
    basic.ui_success("ok")
    assert "✓ ok" in capsys.readouterr().out
