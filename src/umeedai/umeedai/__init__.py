"""UmeedAI configuration backend.

Feature modules (thresholds, audit) with a thin Flask controller layer over
service/repository layers, wired together in ``container.py``.
"""
from __future__ import annotations

from .container import Container, build_container
from .main import create_app

__all__ = ["Container", "build_container", "create_app"]
