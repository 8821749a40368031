"""JSON API endpoints consumed by the rendering layer."""
