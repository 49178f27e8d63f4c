"""Allow ``python -m companion``."""

from companion.cli.commands import app

app()
