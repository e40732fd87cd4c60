"""Policy and jurisdiction decision engine for evidence management."""

__version__ = "0.1.0"
