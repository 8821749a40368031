"""Tests for sidebar tree builder."""

import pytest
from sitenav.core.errors import (
    DanglingDocumentReference,
    DuplicateDocumentReference,
    EmptyCategory,
    Location,
    MalformedEntry,
    SidebarValidationError,
)
from sitenav.core.sidebar import (
    Category,
    DocumentReference,
    NavigationTree,
    build_sidebar,
    build_sidebars,
    find_sidebar,
)

KNOWN = {
    "intro",
    "quick-start",
    "api/balance",
    "api/packages",
    "api/create-order",
    "api/v2/esims",
    "examples",
}


def doc(doc_id: str, label: str | None = None) -> dict[str, object]:
    node: dict[str, object] = {"type": "doc", "id": doc_id}
    if label is not None:
        node["label"] = label
    return node


def category(label: str, items: list[object], **extra: object) -> dict[str, object]:
    return {"type": "category", "label": label, "items": items, **extra}


class TestBuildSidebar:
    """Tests for build_sidebar() on valid declarations."""

    def test_flat_sidebar(self) -> None:
        """Build two leaf entries in declared order."""
        tree = build_sidebar(
            "apiSidebar",
            [doc("intro"), doc("quick-start")],
            {"intro", "quick-start"},
        )

        assert tree.name == "apiSidebar"
        assert [item.id for item in tree.items] == ["intro", "quick-start"]
        assert all(isinstance(item, DocumentReference) for item in tree.items)

    def test_nested_category(self) -> None:
        """Build category and index its documents under its label."""
        tree = build_sidebar(
            "apiSidebar",
            [category("API Endpoints", [doc("api/balance")])],
            {"api/balance"},
        )

        assert len(tree.items) == 1
        endpoints = tree.items[0]
        assert isinstance(endpoints, Category)
        assert endpoints.label == "API Endpoints"
        assert endpoints.items == (DocumentReference(id="api/balance", title="Balance"),)
        assert tree.breadcrumbs["api/balance"] == ("API Endpoints",)

    def test_preserves_declaration_order(self) -> None:
        """Depth-first traversal matches declaration order, not sorted order."""
        declared = [
            doc("quick-start"),
            category(
                "API",
                [
                    doc("api/packages"),
                    category("V2", [doc("api/v2/esims")]),
                    doc("api/balance"),
                ],
            ),
            doc("intro"),
        ]

        tree = build_sidebar("s", declared, KNOWN)

        assert tree.document_ids() == [
            "quick-start",
            "api/packages",
            "api/v2/esims",
            "api/balance",
            "intro",
        ]

    def test_deep_nesting_builds_full_breadcrumbs(self) -> None:
        """Category depth is unbounded and breadcrumbs list every ancestor."""
        declared = [category("A", [category("B", [category("C", [doc("api/v2/esims")])])])]

        tree = build_sidebar("s", declared, KNOWN)

        assert tree.get_breadcrumbs("api/v2/esims") == ("A", "B", "C")

    def test_top_level_document_has_empty_breadcrumbs(self) -> None:
        """Documents at the root have no ancestor categories."""
        tree = build_sidebar("s", [doc("intro")], KNOWN)

        assert tree.get_breadcrumbs("intro") == ()
        assert tree.get_breadcrumbs("examples") is None

    def test_collapsed_defaults_to_true(self) -> None:
        """Categories are collapsed unless declared otherwise."""
        tree = build_sidebar(
            "s",
            [
                category("Closed", [doc("intro")]),
                category("Open", [doc("examples")], collapsed=False),
            ],
            KNOWN,
        )

        closed, opened = tree.items
        assert isinstance(closed, Category) and closed.collapsed is True
        assert isinstance(opened, Category) and opened.collapsed is False

    def test_label_resolution(self) -> None:
        """Use declared label, then document title, then id-derived title."""
        tree = build_sidebar(
            "s",
            [doc("intro", "Introduction"), doc("quick-start"), doc("api/create-order")],
            KNOWN,
            titles={"quick-start": "Getting Started"},
        )

        titles = [item.title for item in tree.iter_documents()]
        assert titles == ["Introduction", "Getting Started", "Create Order"]
        assert tree.items[1].label is None

    def test_is_idempotent(self) -> None:
        """Identical inputs give structurally identical trees."""
        declared = [doc("intro"), category("API", [doc("api/balance")])]

        first = build_sidebar("s", declared, KNOWN)
        second = build_sidebar("s", declared, KNOWN)

        assert first == second
        assert first.to_dict() == second.to_dict()
        assert dict(first.breadcrumbs) == dict(second.breadcrumbs)

    def test_does_not_mutate_declaration(self) -> None:
        """Declaration data is left untouched."""
        declared = [category("API", [doc("api/balance")])]
        snapshot = [category("API", [doc("api/balance")])]

        build_sidebar("s", declared, KNOWN)

        assert declared == snapshot

    def test_tree_is_immutable(self) -> None:
        """Trees and their breadcrumb index cannot be modified."""
        tree = build_sidebar("s", [doc("intro")], KNOWN)

        with pytest.raises(AttributeError):
            tree.name = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            tree.breadcrumbs["x"] = ()  # type: ignore[index]

    def test_empty_sidebar(self) -> None:
        """A sidebar without entries is valid and empty."""
        tree = build_sidebar("s", [], KNOWN)

        assert tree.items == ()
        assert tree.document_ids() == []


class TestBuildSidebarErrors:
    """Tests for build_sidebar() validation failures."""

    def test_dangling_reference(self) -> None:
        """Fail on ids absent from the content collection."""
        declared = [category("API Endpoints", [doc("api/balance"), doc("api/missing")])]

        with pytest.raises(DanglingDocumentReference) as exc_info:
            build_sidebar("apiSidebar", declared, KNOWN)

        error = exc_info.value
        assert error.doc_id == "api/missing"
        assert error.location == Location("apiSidebar", ("API Endpoints",), 1)
        assert "api/missing" in str(error)
        assert "apiSidebar > API Endpoints [1]" in str(error)

    def test_duplicate_reference_across_categories(self) -> None:
        """Fail when the same id is declared under two categories."""
        declared = [
            category("Start", [doc("intro")]),
            category("More", [doc("examples"), doc("intro")]),
        ]

        with pytest.raises(DuplicateDocumentReference) as exc_info:
            build_sidebar("s", declared, KNOWN)

        error = exc_info.value
        assert error.doc_id == "intro"
        assert error.first_location == Location("s", ("Start",), 0)
        assert error.location == Location("s", ("More",), 1)

    def test_empty_category(self) -> None:
        """Fail on categories with no items."""
        declared = [category("Outer", [category("Empty", [])])]

        with pytest.raises(EmptyCategory) as exc_info:
            build_sidebar("s", declared, KNOWN)

        assert exc_info.value.label == "Empty"
        assert exc_info.value.location.categories == ("Outer",)

    @pytest.mark.parametrize(
        "node",
        [
            "intro",
            {"id": "intro"},
            {"type": "link", "href": "https://example.com"},
            {"type": "doc"},
            {"type": "doc", "id": ""},
            {"type": "doc", "id": "api//balance"},
            {"type": "doc", "id": "intro", "label": 3},
            {"type": "doc", "id": "intro", "lable": "Typo"},
            {"type": "category", "items": [{"type": "doc", "id": "intro"}]},
            {"type": "category", "label": "  ", "items": [{"type": "doc", "id": "intro"}]},
            {"type": "category", "label": "API"},
            {"type": "category", "label": "API", "items": "intro"},
            {"type": "category", "label": "API", "collapsed": "no", "items": []},
        ],
    )
    def test_malformed_entry(self, node: object) -> None:
        """Reject any shape other than a doc reference or category."""
        with pytest.raises(MalformedEntry):
            build_sidebar("s", [node], KNOWN)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_sidebar_name(self, name: str) -> None:
        """Reject blank sidebar names."""
        with pytest.raises(MalformedEntry):
            build_sidebar(name, [doc("intro")], KNOWN)

    def test_non_list_entries(self) -> None:
        """Reject a sidebar that is not a list."""
        with pytest.raises(MalformedEntry):
            build_sidebar("s", {"type": "doc", "id": "intro"}, KNOWN)  # type: ignore[arg-type]

    def test_fail_fast_reports_first_error_in_traversal_order(self) -> None:
        """Report the earliest error in depth-first declaration order."""
        declared = [
            category("API", [doc("api/missing")]),
            category("Empty", []),
        ]

        with pytest.raises(DanglingDocumentReference):
            build_sidebar("s", declared, KNOWN)


class TestCollectAll:
    """Tests for collect-all validation mode."""

    def test_reports_every_error_in_traversal_order(self) -> None:
        """Collect all findings instead of stopping at the first."""
        declared = [
            doc("intro"),
            category("API", [doc("api/missing"), {"type": "bogus"}]),
            category("Empty", []),
            doc("intro"),
        ]

        with pytest.raises(SidebarValidationError) as exc_info:
            build_sidebar("s", declared, KNOWN, collect_all=True)

        errors = exc_info.value.errors
        assert [type(e) for e in errors] == [
            DanglingDocumentReference,
            MalformedEntry,
            EmptyCategory,
            DuplicateDocumentReference,
        ]
        assert "4 sidebar error(s)" in str(exc_info.value)

    def test_repeated_missing_id_reports_dangling_then_duplicate(self) -> None:
        """First use of a missing id is dangling, the repeat is a duplicate."""
        declared = [doc("nope"), category("Again", [doc("nope")])]

        with pytest.raises(SidebarValidationError) as exc_info:
            build_sidebar("s", declared, KNOWN, collect_all=True)

        errors = exc_info.value.errors
        assert [type(e) for e in errors] == [
            DanglingDocumentReference,
            DuplicateDocumentReference,
        ]
        assert all(e.doc_id == "nope" for e in errors)  # type: ignore[attr-defined]

    def test_valid_declaration_builds_tree(self) -> None:
        """Collect-all mode builds the same tree when nothing is wrong."""
        declared = [doc("intro"), category("API", [doc("api/balance")])]

        tree = build_sidebar("s", declared, KNOWN, collect_all=True)

        assert tree == build_sidebar("s", declared, KNOWN)

    def test_error_to_dict(self) -> None:
        """Serialize findings for API responses."""
        with pytest.raises(SidebarValidationError) as exc_info:
            build_sidebar("s", [category("API", [doc("nope")])], KNOWN, collect_all=True)

        assert exc_info.value.errors[0].to_dict() == {
            "type": "DanglingDocumentReference",
            "message": "dangling document reference 'nope'",
            "sidebar": "s",
            "path": ["API"],
            "index": 0,
        }


class TestBuildSidebars:
    """Tests for build_sidebars()."""

    def test_builds_each_named_sidebar_in_order(self) -> None:
        """Build independent sidebars keyed by name."""
        sidebars = build_sidebars(
            {"guides": [doc("intro")], "api": [doc("api/balance"), doc("intro")]},
            KNOWN,
        )

        assert list(sidebars) == ["guides", "api"]
        assert sidebars["api"].document_ids() == ["api/balance", "intro"]

    def test_collects_errors_across_sidebars(self) -> None:
        """Report findings from every sidebar in collect-all mode."""
        with pytest.raises(SidebarValidationError) as exc_info:
            build_sidebars(
                {"a": [doc("missing-a")], "b": [doc("missing-b")]},
                KNOWN,
                collect_all=True,
            )

        assert [e.location.sidebar for e in exc_info.value.errors] == ["a", "b"]

    def test_fail_fast_raises_first_sidebar_error(self) -> None:
        """Stop at the first failing sidebar."""
        with pytest.raises(DanglingDocumentReference) as exc_info:
            build_sidebars({"a": [doc("missing-a")], "b": [doc("missing-b")]}, KNOWN)

        assert exc_info.value.doc_id == "missing-a"


class TestNavigationTreeQueries:
    """Tests for NavigationTree lookups."""

    @pytest.fixture
    def tree(self) -> NavigationTree:
        return build_sidebar(
            "apiSidebar",
            [
                doc("intro"),
                category("API", [doc("api/balance"), doc("api/packages")]),
                doc("examples"),
            ],
            KNOWN,
        )

    def test_get_document(self, tree: NavigationTree) -> None:
        """Look up references by id."""
        found = tree.get_document("api/balance")

        assert found is not None
        assert found.title == "Balance"
        assert tree.get_document("quick-start") is None

    def test_contains(self, tree: NavigationTree) -> None:
        """Support membership tests by id."""
        assert "api/packages" in tree
        assert "quick-start" not in tree

    def test_pagination_crosses_category_boundaries(self, tree: NavigationTree) -> None:
        """Previous/next follow depth-first order."""
        first = tree.get_pagination("intro")
        middle = tree.get_pagination("api/packages")
        last = tree.get_pagination("examples")

        assert first is not None and middle is not None and last is not None
        assert first.previous is None
        assert first.next is not None and first.next.id == "api/balance"
        assert middle.previous is not None and middle.previous.id == "api/balance"
        assert middle.next is not None and middle.next.id == "examples"
        assert last.next is None

    def test_pagination_unknown_document(self, tree: NavigationTree) -> None:
        """Return None for documents outside the sidebar."""
        assert tree.get_pagination("quick-start") is None

    def test_to_dict(self, tree: NavigationTree) -> None:
        """Convert tree to dict."""
        result = tree.to_dict()

        assert result == {
            "name": "apiSidebar",
            "items": [
                {"type": "doc", "id": "intro", "label": "Intro"},
                {
                    "type": "category",
                    "label": "API",
                    "collapsed": True,
                    "items": [
                        {"type": "doc", "id": "api/balance", "label": "Balance"},
                        {"type": "doc", "id": "api/packages", "label": "Packages"},
                    ],
                },
                {"type": "doc", "id": "examples", "label": "Examples"},
            ],
        }

    def test_find_sidebar(self, tree: NavigationTree) -> None:
        """Find the first sidebar referencing a document."""
        other = build_sidebar("other", [doc("quick-start"), doc("intro")], KNOWN)
        sidebars = {"other": other, "apiSidebar": tree}

        assert find_sidebar(sidebars, "intro") is other
        assert find_sidebar(sidebars, "api/balance") is tree
        assert find_sidebar(sidebars, "api/v2/esims") is None
