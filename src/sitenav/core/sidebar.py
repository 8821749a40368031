"""Sidebar navigation tree builder.

Turns author-written sidebar declarations (nested lists of ``doc`` and
``category`` entries) into immutable navigation trees. Every referenced
document is checked against the content collection, and a breadcrumb
index is derived so pages can show their ancestor categories without
walking the tree again.
"""

from __future__ import annotations

from collections.abc import Container, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Literal, TypedDict

from sitenav.core.content import title_from_name
from sitenav.core.errors import (
    DanglingDocumentReference,
    DuplicateDocumentReference,
    EmptyCategory,
    Location,
    MalformedEntry,
    SidebarError,
    SidebarValidationError,
)
from sitenav.core.types import DocId

DOC_KEYS = frozenset({"type", "id", "label"})
CATEGORY_KEYS = frozenset({"type", "label", "collapsed", "items"})


class DocumentReferenceDict(TypedDict):
    """Dictionary representation of a document reference."""

    type: Literal["doc"]
    id: str
    label: str


class CategoryDict(TypedDict):
    """Dictionary representation of a category."""

    type: Literal["category"]
    label: str
    collapsed: bool
    items: list[DocumentReferenceDict | CategoryDict]


class NavigationTreeDict(TypedDict):
    """Dictionary representation of a navigation tree."""

    name: str
    items: list[DocumentReferenceDict | CategoryDict]


@dataclass(frozen=True)
class DocumentReference:
    """Leaf entry naming one content document.

    ``label`` is the label as declared; ``title`` is what renderers show
    (the declared label, or a title resolved from the document).
    """

    id: DocId
    title: str
    label: str | None = None

    def to_dict(self) -> DocumentReferenceDict:
        """Convert to dictionary for JSON serialization."""
        return {"type": "doc", "id": self.id, "label": self.title}


@dataclass(frozen=True)
class Category:
    """Labelled group of child entries."""

    label: str
    items: tuple[Entry, ...]
    collapsed: bool = True

    def iter_documents(self) -> Iterator[DocumentReference]:
        """Yield contained document references depth-first."""
        yield from _iter_documents(self.items)

    def to_dict(self) -> CategoryDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": "category",
            "label": self.label,
            "collapsed": self.collapsed,
            "items": [item.to_dict() for item in self.items],
        }


Entry = DocumentReference | Category


@dataclass(frozen=True)
class Pagination:
    """Previous and next documents in sidebar order."""

    previous: DocumentReference | None
    next: DocumentReference | None


@dataclass(frozen=True)
class NavigationTree:
    """Validated, immutable sidebar.

    ``breadcrumbs`` maps every contained document id to the labels of the
    categories leading to it, root first. It is derived from ``items`` and
    excluded from equality.
    """

    name: str
    items: tuple[Entry, ...]
    breadcrumbs: Mapping[DocId, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({}),
        compare=False,
    )

    def iter_documents(self) -> Iterator[DocumentReference]:
        """Yield document references depth-first, in declaration order."""
        yield from _iter_documents(self.items)

    def document_ids(self) -> list[DocId]:
        """Return contained document ids in declaration order."""
        return [doc.id for doc in self._documents]

    def get_document(self, doc_id: str) -> DocumentReference | None:
        """Get document reference by id.

        Args:
            doc_id: Document id (e.g., "api/balance")

        Returns:
            DocumentReference if the sidebar contains it, None otherwise
        """
        idx = self._positions.get(DocId(doc_id))
        if idx is None:
            return None
        return self._documents[idx]

    def get_breadcrumbs(self, doc_id: str) -> tuple[str, ...] | None:
        """Get ancestor category labels for a document.

        Returns:
            Labels from root to the entry (empty for top-level documents),
            or None when the sidebar does not contain the document
        """
        return self.breadcrumbs.get(DocId(doc_id))

    def get_pagination(self, doc_id: str) -> Pagination | None:
        """Get previous/next documents for a document.

        Order follows depth-first traversal, so the last document of a
        category links to the first document after it.
        """
        idx = self._positions.get(DocId(doc_id))
        if idx is None:
            return None
        previous = self._documents[idx - 1] if idx > 0 else None
        following = self._documents[idx + 1] if idx + 1 < len(self._documents) else None
        return Pagination(previous=previous, next=following)

    def to_dict(self) -> NavigationTreeDict:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "items": [item.to_dict() for item in self.items]}

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._positions

    @cached_property
    def _documents(self) -> tuple[DocumentReference, ...]:
        return tuple(self.iter_documents())

    @cached_property
    def _positions(self) -> dict[DocId, int]:
        return {doc.id: i for i, doc in enumerate(self._documents)}


def _iter_documents(items: Sequence[Entry]) -> Iterator[DocumentReference]:
    for item in items:
        if isinstance(item, Category):
            yield from item.iter_documents()
        else:
            yield item


def build_sidebar(
    name: str,
    entries: Sequence[object],
    known_document_ids: Container[str],
    *,
    titles: Mapping[str, str] | None = None,
    collect_all: bool = False,
) -> NavigationTree:
    """Build and validate a single sidebar.

    Args:
        name: Sidebar name (non-empty)
        entries: Declared entries as literal nested data
        known_document_ids: Ids of every document in the content collection
        titles: Document titles used when an entry declares no label
        collect_all: Report every finding instead of stopping at the first

    Returns:
        Validated NavigationTree

    Raises:
        SidebarError: First error in depth-first declaration order
            (fail-fast mode)
        SidebarValidationError: All errors in traversal order
            (collect-all mode)
    """
    walker = _SidebarWalker(name, known_document_ids, titles, collect_all=collect_all)
    tree = walker.build(entries)
    if walker.errors:
        raise SidebarValidationError(walker.errors)
    return tree


def build_sidebars(
    declarations: Mapping[str, Sequence[object]],
    known_document_ids: Container[str],
    *,
    titles: Mapping[str, str] | None = None,
    collect_all: bool = False,
) -> dict[str, NavigationTree]:
    """Build every named sidebar.

    Sidebars are independent: a document may appear in more than one.
    In collect-all mode findings from all sidebars are reported together.

    Returns:
        Trees keyed by sidebar name, in declaration order
    """
    sidebars: dict[str, NavigationTree] = {}
    errors: list[SidebarError] = []
    for name, entries in declarations.items():
        try:
            sidebars[name] = build_sidebar(
                name,
                entries,
                known_document_ids,
                titles=titles,
                collect_all=collect_all,
            )
        except SidebarValidationError as e:
            errors.extend(e.errors)
    if errors:
        raise SidebarValidationError(errors)
    return sidebars


def find_sidebar(
    sidebars: Mapping[str, NavigationTree],
    doc_id: str,
) -> NavigationTree | None:
    """Return the first sidebar containing the document, if any."""
    for tree in sidebars.values():
        if doc_id in tree:
            return tree
    return None


class _SidebarWalker:
    """Single-pass depth-first walk over one sidebar declaration."""

    def __init__(
        self,
        name: str,
        known_document_ids: Container[str],
        titles: Mapping[str, str] | None,
        *,
        collect_all: bool,
    ) -> None:
        self._name = name
        self._known = known_document_ids
        self._titles = titles or {}
        self._collect_all = collect_all
        self._seen: dict[DocId, Location] = {}
        self._breadcrumbs: dict[DocId, tuple[str, ...]] = {}
        self.errors: list[SidebarError] = []

    def build(self, entries: Sequence[object]) -> NavigationTree:
        root = Location(sidebar=str(self._name))
        if not isinstance(self._name, str) or not self._name.strip():
            self._fail(MalformedEntry("sidebar name must be a non-empty string", root))
            return NavigationTree(name=str(self._name), items=())
        if not isinstance(entries, list | tuple):
            self._fail(MalformedEntry("sidebar must be a list of entries", root))
            return NavigationTree(name=self._name, items=())

        items = self._walk(entries, ())
        return NavigationTree(
            name=self._name,
            items=items,
            breadcrumbs=MappingProxyType(self._breadcrumbs),
        )

    def _walk(
        self,
        nodes: Sequence[object],
        categories: tuple[str, ...],
    ) -> tuple[Entry, ...]:
        items: list[Entry] = []
        for index, node in enumerate(nodes):
            location = Location(self._name, categories, index)
            entry = self._parse_entry(node, location)
            if entry is not None:
                items.append(entry)
        return tuple(items)

    def _parse_entry(self, node: object, location: Location) -> Entry | None:
        if not isinstance(node, Mapping):
            return self._fail(
                MalformedEntry(f"entry must be a mapping, got {type(node).__name__}", location),
            )

        kind = node.get("type")
        if kind == "doc":
            return self._parse_doc(node, location)
        if kind == "category":
            return self._parse_category(node, location)
        if kind is None:
            return self._fail(MalformedEntry("entry is missing a 'type' tag", location))
        return self._fail(MalformedEntry(f"unknown entry type {kind!r}", location))

    def _parse_doc(
        self,
        node: Mapping[str, object],
        location: Location,
    ) -> DocumentReference | None:
        unknown = set(node) - DOC_KEYS
        if unknown:
            return self._fail(
                MalformedEntry(f"unknown doc keys: {', '.join(sorted(unknown))}", location),
            )

        raw_id = node.get("id")
        if not isinstance(raw_id, str) or not raw_id.strip():
            return self._fail(MalformedEntry("doc entry requires a non-empty 'id'", location))
        if any(not part for part in raw_id.split("/")):
            return self._fail(
                MalformedEntry(f"doc id {raw_id!r} has an empty path segment", location),
            )

        label = node.get("label")
        if label is not None and (not isinstance(label, str) or not label.strip()):
            return self._fail(MalformedEntry("doc 'label' must be a non-empty string", location))

        doc_id = DocId(raw_id)
        first_location = self._seen.get(doc_id)
        if first_location is not None:
            return self._fail(DuplicateDocumentReference(doc_id, location, first_location))
        self._seen[doc_id] = location

        if doc_id not in self._known:
            return self._fail(DanglingDocumentReference(doc_id, location))

        self._breadcrumbs[doc_id] = location.categories
        return DocumentReference(
            id=doc_id,
            title=label or self._titles.get(doc_id) or title_from_name(doc_id.rsplit("/", 1)[-1]),
            label=label,
        )

    def _parse_category(
        self,
        node: Mapping[str, object],
        location: Location,
    ) -> Category | None:
        unknown = set(node) - CATEGORY_KEYS
        if unknown:
            return self._fail(
                MalformedEntry(f"unknown category keys: {', '.join(sorted(unknown))}", location),
            )

        label = node.get("label")
        if not isinstance(label, str) or not label.strip():
            return self._fail(
                MalformedEntry("category requires a non-empty 'label'", location),
            )

        collapsed = node.get("collapsed", True)
        if not isinstance(collapsed, bool):
            return self._fail(
                MalformedEntry(f"category '{label}' 'collapsed' must be a boolean", location),
            )

        children = node.get("items")
        if not isinstance(children, list | tuple):
            return self._fail(
                MalformedEntry(f"category '{label}' requires an 'items' list", location),
            )
        if not children:
            return self._fail(EmptyCategory(label, location))

        items = self._walk(children, (*location.categories, label))
        if not items:
            return None
        return Category(label=label, items=items, collapsed=collapsed)

    def _fail(self, error: SidebarError) -> None:
        if not self._collect_all:
            raise error
        self.errors.append(error)
