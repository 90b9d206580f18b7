"""Access simulator HTTP API.

A thin FastAPI layer that loads room policies and request batches and hands
them to the core evaluator. No decision logic lives here.
"""

from .server import create_app  # noqa: F401
