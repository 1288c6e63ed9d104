"""Allow ``python -m applyto``."""

from applyto.cli import app

app(prog_name="applyto")
