"""ASGI entrypoint (`uvicorn app.main:app`); configuration lives in the app factory."""

from app.core.app_factory import create_app

app = create_app()
