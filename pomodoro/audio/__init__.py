"""Audio package."""

from .sounds import FeedbackPlayer

__all__ = ["FeedbackPlayer"]
