"""ASGI entrypoint: ``uvicorn app.main:app``."""

from app.core.app import create_app

app = create_app()
