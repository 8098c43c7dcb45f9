"""Allow running as ``python -m slidecode``."""

from slidecode.cli.main import app

app()
