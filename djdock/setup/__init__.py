"""Setup-time helpers: console, preflight, environment and CLI runner."""
