"""Agents orchestrating the scan pipeline."""

from .base import BaseAgent
from .scan import ScanAgent

__all__ = ["BaseAgent", "ScanAgent"]
