"""PageCraft - page builder service with live preview."""

__version__ = "1.0.0"
