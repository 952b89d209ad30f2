"""questline: progression and completion-bonus engine."""

__version__ = "0.1.0"
