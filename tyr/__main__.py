"""Entry point for ``python -m tyr``."""

from tyr.cli import app

app(prog_name="tyr")
