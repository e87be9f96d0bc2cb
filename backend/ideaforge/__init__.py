"""IdeaForge — startup blueprint generation and rendering service."""

__version__ = "0.1.0"
