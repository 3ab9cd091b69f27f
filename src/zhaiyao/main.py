"""FastAPI application entry point."""

import ddtrace.auto  # noqa: F401

from zhaiyao.app import create_app

app = create_app()
