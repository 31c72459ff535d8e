"""wod-runner: guided workout timer and result logger."""

__version__ = "0.1.0"
