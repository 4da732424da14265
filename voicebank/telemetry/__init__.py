"""Telemetry and observability helpers.

This package emits deterministic run events for the speech generation workflow.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
