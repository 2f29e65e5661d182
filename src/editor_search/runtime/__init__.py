"""Runtime services: telemetry and engine-wide limits."""

from . import telemetry
from .config import LIMITS, SearchLimits, load_limits

__all__ = ["telemetry", "LIMITS", "SearchLimits", "load_limits"]
