"""Push-webhook receiver that runs configured commands per repository."""

__version__ = "0.1.0"
