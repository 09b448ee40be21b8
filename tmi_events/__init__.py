"""Parser and event model for the Twitch chat (TMI) IRC dialect."""

__version__ = "1.0.0"
