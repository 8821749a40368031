"""Live reload for development mode."""

from sitenav.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
