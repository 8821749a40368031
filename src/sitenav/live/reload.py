"""WebSocket-based live reload for development mode.

Monitors documentation sources and the sidebar declaration file. Any
relevant change discards the built sidebars and notifies connected
clients via WebSocket so they refetch navigation.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import awatch

from sitenav.core.content import doc_id_for, parse_frontmatter, read_source
from sitenav.core.loader import SidebarLoader

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["*.md", "*.mdx"]


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload."""

    def __init__(
        self,
        loader: SidebarLoader,
        watch_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            loader: SidebarLoader to invalidate on changes
            watch_patterns: Glob patterns for docs (default: markdown files)
        """
        self._loader = loader
        self._source_dir = loader.config.docs.source_dir.resolve()
        self._sidebars_file = loader.config.docs.sidebars_file.resolve()
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    def watch_paths(self) -> list[Path]:
        """Existing directories to watch, without duplicates."""
        paths: list[Path] = []
        for path in (self._source_dir, self._sidebars_file.parent):
            if path.exists() and path not in paths:
                paths.append(path)
        return paths

    async def _watch_files(self) -> None:
        """Watch for file changes and broadcast reload events."""
        paths = self.watch_paths()
        if not paths:
            logger.warning("Live reload: nothing to watch")
            return

        async for changes in awatch(*paths):
            for _change_type, path_str in changes:
                await self.handle_change(Path(path_str))

    async def handle_change(self, path: Path) -> bool:
        """Invalidate navigation and notify clients if a path is relevant.

        Deleted files count as changes since they can leave sidebar
        references dangling.

        Returns:
            True if the change triggered a reload
        """
        if path == self._sidebars_file:
            doc_id = ""
        elif self._matches_patterns(path):
            doc_id = self._to_doc_id(path)
        else:
            return False

        logger.debug(f"Change detected: {path}")
        self._loader.invalidate()
        await self._broadcast_reload(doc_id)
        return True

    def _matches_patterns(self, path: Path) -> bool:
        """Check if a path is inside the docs dir and matches a pattern."""
        try:
            relative = path.relative_to(self._source_dir)
        except ValueError:
            return False

        return any(relative.match(pattern) for pattern in self._watch_patterns)

    def _to_doc_id(self, file_path: Path) -> str:
        """Convert a source file path to its document id (e.g., "api/balance").

        Deleted files have no frontmatter to read, so their id comes from
        the path alone.
        """
        frontmatter: dict[str, str] = {}
        if file_path.is_file():
            frontmatter, _ = parse_frontmatter(read_source(file_path))
        return doc_id_for(self._source_dir, file_path, frontmatter)

    async def _broadcast_reload(self, doc_id: str) -> None:
        """Broadcast reload event to all connected clients."""
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "path": doc_id})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket."""
    return [web.get("/ws/live-reload", manager.handle_websocket)]
