"""Content collection.

Discovers the documents available under the docs source directory and
the titles they declare. Sidebars are validated against this collection.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import yaml

from sitenav.core.types import DocId

logger = logging.getLogger(__name__)

DOC_SUFFIXES = (".md", ".mdx")
FRONTMATTER_KEYS = ("id", "title", "sidebar_label")

_H1_RE = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)
_NUMBER_PREFIX_RE = re.compile(r"^\d+[-_.]")


class ContentError(ValueError):
    """Content collection cannot be built."""


class DuplicateDocumentId(ContentError):
    """Two source files resolve to the same document id."""

    def __init__(self, doc_id: DocId, first: Path, second: Path) -> None:
        super().__init__(f"document id '{doc_id}' is declared by both {first} and {second}")
        self.doc_id = doc_id
        self.first = first
        self.second = second


@dataclass(frozen=True)
class Document:
    """Content document metadata."""

    id: DocId
    title: str
    source_path: Path


class ContentCollection:
    """Documents discovered in a docs source directory, keyed by id."""

    __slots__ = ("_documents",)

    def __init__(self, documents: list[Document]) -> None:
        self._documents: dict[DocId, Document] = {}
        for doc in documents:
            existing = self._documents.get(doc.id)
            if existing is not None:
                raise DuplicateDocumentId(doc.id, existing.source_path, doc.source_path)
            self._documents[doc.id] = doc

    @classmethod
    def scan(cls, source_dir: Path) -> ContentCollection:
        """Scan a directory for markdown documents.

        Files and directories starting with ``.`` or ``_`` are skipped.

        Args:
            source_dir: Docs source directory

        Returns:
            ContentCollection, empty if the directory doesn't exist
        """
        if not source_dir.exists():
            logger.warning(f"Docs source directory not found: {source_dir}")
            return cls([])

        documents = [_read_document(source_dir, path) for path in _iter_sources(source_dir)]
        logger.debug(f"Discovered {len(documents)} documents in {source_dir}")
        return cls(documents)

    @property
    def ids(self) -> frozenset[DocId]:
        """All known document ids."""
        return frozenset(self._documents)

    @property
    def titles(self) -> dict[DocId, str]:
        """Document titles keyed by id."""
        return {doc_id: doc.title for doc_id, doc in self._documents.items()}

    def get(self, doc_id: str) -> Document | None:
        return self._documents.get(DocId(doc_id))

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)


def title_from_name(name: str) -> str:
    """Generate title from file name or id segment.

    ``setup-guide`` and ``setup_guide`` both become ``Setup Guide``.
    """
    return name.replace("-", " ").replace("_", " ").title()


def parse_frontmatter(text: str) -> tuple[dict[str, str], str]:
    """Split YAML frontmatter from markdown text.

    Only top-level string values for ``id``, ``title`` and
    ``sidebar_label`` are kept.

    Returns:
        Frontmatter values and the remaining body. Text without a leading
        ``---`` block, or with an unterminated one, yields an empty
        mapping and the original text.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, text

    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            block = "\n".join(lines[1:i])
            body = "\n".join(lines[i + 1 :])
            break
    else:
        return {}, text

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.warning(f"Invalid frontmatter: {e}")
        return {}, body

    if not isinstance(data, dict):
        return {}, body

    values = {
        key: data[key].strip()
        for key in FRONTMATTER_KEYS
        if isinstance(data.get(key), str) and data[key].strip()
    }
    return values, body


def read_source(path: Path) -> str:
    """Read a markdown source, returning empty text when unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return ""


def doc_id_for(source_dir: Path, path: Path, frontmatter: dict[str, str]) -> DocId:
    """Compute the document id for a source file.

    The id is the path relative to ``source_dir`` without extension and
    number prefixes (``01-guides/02_setup.md`` becomes ``guides/setup``).
    A frontmatter ``id`` replaces the file name segment.
    """
    relative = path.relative_to(source_dir)
    name = frontmatter.get("id") or _NUMBER_PREFIX_RE.sub("", relative.stem)
    parents = [_NUMBER_PREFIX_RE.sub("", part) for part in relative.parent.parts]
    return DocId("/".join([*parents, name]))


def _iter_sources(source_dir: Path) -> Iterator[Path]:
    for path in sorted(source_dir.rglob("*")):
        if path.suffix not in DOC_SUFFIXES or not path.is_file():
            continue
        relative = path.relative_to(source_dir)
        if any(part.startswith((".", "_")) for part in relative.parts):
            continue
        yield path


def _read_document(source_dir: Path, path: Path) -> Document:
    frontmatter, body = parse_frontmatter(read_source(path))
    doc_id = doc_id_for(source_dir, path, frontmatter)

    return Document(
        id=doc_id,
        title=_extract_title(frontmatter, body) or title_from_name(doc_id.rsplit("/", 1)[-1]),
        source_path=path.relative_to(source_dir),
    )


def _extract_title(frontmatter: dict[str, str], body: str) -> str | None:
    """Resolve title from frontmatter, then the first H1 heading."""
    for key in ("sidebar_label", "title"):
        if frontmatter.get(key):
            return frontmatter[key]
    match = _H1_RE.search(body)
    if match:
        return match.group(1).strip()
    return None
