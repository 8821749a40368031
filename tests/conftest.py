"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from sitenav.config import (
    Config,
    DocsConfig,
    LiveReloadConfig,
    ServerConfig,
    SiteConfig,
    ValidationConfig,
)

API_SIDEBAR = [
    {"type": "doc", "id": "intro", "label": "Introduction"},
    {"type": "doc", "id": "quick-start", "label": "Quick Start"},
    {"type": "doc", "id": "api-authentication", "label": "Authentication"},
    {
        "type": "category",
        "label": "API Endpoints",
        "collapsed": False,
        "items": [
            {"type": "doc", "id": "api/balance", "label": "Balance Query"},
            {"type": "doc", "id": "api/packages", "label": "Get All Packages"},
            {"type": "doc", "id": "api/create-order"},
        ],
    },
    {"type": "doc", "id": "examples", "label": "Code Examples"},
]

DOCS = {
    "intro.md": "# Introduction\n\nWelcome.",
    "quick-start.md": "# Quick Start\n\nSteps.",
    "api-authentication.md": "---\ntitle: Authentication\n---\n\nHeaders.",
    "api/balance.md": "# Balance\n\nQuery balance.",
    "api/packages.md": "# Packages\n\nList packages.",
    "api/create-order.md": "# Create an Order\n\nOrder a package.",
    "examples.md": "# Examples\n\nCode.",
}


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create docs directory with the API documentation structure."""
    docs = tmp_path / "docs"
    for name, text in DOCS.items():
        path = docs / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return docs


@pytest.fixture
def sidebars_file(tmp_path: Path) -> Path:
    """Write the API sidebar declaration."""
    path = tmp_path / "sidebars.json"
    path.write_text(json.dumps({"apiSidebar": API_SIDEBAR}))
    return path


@pytest.fixture
def test_config(docs_dir: Path, sidebars_file: Path) -> Config:
    """Create a test configuration pointing at tmp_path sources."""
    return Config(
        site=SiteConfig(title="eSIMfly Business API", url="https://docs.esimfly.net"),
        server=ServerConfig(),
        docs=DocsConfig(source_dir=docs_dir, sidebars_file=sidebars_file),
        validation=ValidationConfig(),
        live_reload=LiveReloadConfig(enabled=False),
    )
