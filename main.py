"""Entry point for `uvicorn main:app`."""
from desert_pulse.main import app

__all__ = ["app"]
