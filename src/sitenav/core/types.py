"""Core type definitions."""

from typing import NewType

# Document identifier (e.g., "intro", "api/create-order")
# Slash-delimited, relative to the docs source directory, no extension
DocId = NewType("DocId", str)
