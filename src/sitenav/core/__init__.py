"""Sidebar navigation core: declarations, content collection and tree builder."""
