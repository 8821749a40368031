"""Sidebar validation errors.

Every error is fatal to the site build. Errors carry enough structural
context (sidebar name, category path, entry position) for an author to
find the offending declaration.
"""

from dataclasses import dataclass

from sitenav.core.types import DocId


@dataclass(frozen=True)
class Location:
    """Position of an entry inside a sidebar declaration."""

    sidebar: str
    categories: tuple[str, ...] = ()
    index: int | None = None

    def __str__(self) -> str:
        text = " > ".join([self.sidebar, *self.categories])
        if self.index is not None:
            text = f"{text} [{self.index}]"
        return text


class SidebarError(ValueError):
    """Base class for sidebar validation errors."""

    def __init__(self, message: str, location: Location) -> None:
        super().__init__(f"{message} (at {location})")
        self.message = message
        self.location = location

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "sidebar": self.location.sidebar,
            "path": list(self.location.categories),
            "index": self.location.index,
        }


class MalformedEntry(SidebarError):
    """Declared node matches neither a document reference nor a category."""


class DuplicateDocumentReference(SidebarError):
    """Same document id declared more than once in a sidebar."""

    def __init__(
        self,
        doc_id: DocId,
        location: Location,
        first_location: Location,
    ) -> None:
        super().__init__(
            f"duplicate document reference '{doc_id}', first declared at {first_location}",
            location,
        )
        self.doc_id = doc_id
        self.first_location = first_location


class DanglingDocumentReference(SidebarError):
    """Declared document id has no corresponding document."""

    def __init__(self, doc_id: DocId, location: Location) -> None:
        super().__init__(f"dangling document reference '{doc_id}'", location)
        self.doc_id = doc_id


class EmptyCategory(SidebarError):
    """Category declares no child entries."""

    def __init__(self, label: str, location: Location) -> None:
        super().__init__(
            f"category '{label}' must declare at least one entry",
            location,
        )
        self.label = label


class SidebarValidationError(ValueError):
    """All findings of a collect-all validation pass, in traversal order."""

    def __init__(self, errors: list[SidebarError]) -> None:
        lines = [f"{len(errors)} sidebar error(s):"]
        lines.extend(f"  - {error}" for error in errors)
        super().__init__("\n".join(lines))
        self.errors = errors
