"""End-to-end edition processing."""

from .orchestrator import Orchestrator

__all__ = ["Orchestrator"]
