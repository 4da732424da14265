"""HTTP layer for the sample store and speech generation workflow."""

from .app import build_workflow, create_app

__all__ = ["build_workflow", "create_app"]
