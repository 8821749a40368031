"""Sidebar loading with memoization.

Builds every sidebar from the configured docs directory and declaration
file. The result is kept until invalidated, then rebuilt wholesale.
"""

import logging
from dataclasses import dataclass

from sitenav.config import Config
from sitenav.core.content import ContentCollection
from sitenav.core.declarations import load_declarations
from sitenav.core.sidebar import NavigationTree, build_sidebars, find_sidebar
from sitenav.core.types import DocId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteNavigation:
    """All sidebars of a site together with the content they reference."""

    sidebars: dict[str, NavigationTree]
    content: ContentCollection

    def find_sidebar(self, doc_id: str) -> NavigationTree | None:
        """Return the first sidebar containing the document."""
        return find_sidebar(self.sidebars, doc_id)

    def unreferenced_documents(self) -> list[DocId]:
        """Return ids of documents no sidebar references, sorted."""
        referenced: set[DocId] = set()
        for tree in self.sidebars.values():
            referenced.update(tree.document_ids())
        return sorted(doc.id for doc in self.content if doc.id not in referenced)


class SidebarLoader:
    """Loads and caches site navigation.

    ``load()`` raises the same errors as the sidebar builder; a failed
    load is not cached.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._navigation: SiteNavigation | None = None

    @property
    def config(self) -> Config:
        return self._config

    def load(self) -> SiteNavigation:
        """Return cached navigation, building it if needed."""
        if self._navigation is None:
            self._navigation = self._build()
        return self._navigation

    def invalidate(self) -> None:
        """Discard cached navigation so the next load rebuilds it."""
        self._navigation = None

    def _build(self) -> SiteNavigation:
        docs = self._config.docs
        content = ContentCollection.scan(docs.source_dir)
        declarations = load_declarations(docs.sidebars_file)
        sidebars = build_sidebars(
            declarations,
            content.ids,
            titles=content.titles,
            collect_all=self._config.validation.collect_all,
        )
        logger.info(
            f"Built {len(sidebars)} sidebar(s) from {docs.sidebars_file} "
            f"against {len(content)} document(s)",
        )
        return SiteNavigation(sidebars=sidebars, content=content)
