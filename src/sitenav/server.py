"""aiohttp server for sitenav.

Application factory and route registration for the navigation API.
"""

import logging
from collections.abc import Awaitable, Callable

from aiohttp import web

from sitenav.api.config import create_config_routes
from sitenav.api.sidebars import create_sidebar_routes
from sitenav.app_keys import live_reload_enabled_key, sidebar_loader_key, site_config_key
from sitenav.config import Config
from sitenav.core.content import ContentError
from sitenav.core.declarations import DeclarationError
from sitenav.core.errors import SidebarError, SidebarValidationError
from sitenav.core.loader import SidebarLoader
from sitenav.live import LiveReloadManager
from sitenav.live.reload import create_live_reload_routes

logger = logging.getLogger(__name__)

live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def navigation_error_middleware(
    request: web.Request,
    handler: Handler,
) -> web.StreamResponse:
    """Report sidebar build failures as JSON errors."""
    try:
        return await handler(request)
    except SidebarValidationError as e:
        logger.error(str(e))
        return web.json_response(
            {"error": "Sidebar validation failed", "errors": [err.to_dict() for err in e.errors]},
            status=500,
        )
    except SidebarError as e:
        logger.error(str(e))
        return web.json_response(
            {"error": "Sidebar validation failed", "errors": [e.to_dict()]},
            status=500,
        )
    except (ContentError, DeclarationError, FileNotFoundError) as e:
        logger.error(str(e))
        return web.json_response({"error": str(e), "errors": []}, status=500)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[navigation_error_middleware])

    loader = SidebarLoader(config)
    app[sidebar_loader_key] = loader
    app[site_config_key] = config.site
    app[live_reload_enabled_key] = config.live_reload.enabled

    app.router.add_routes(create_config_routes())
    app.router.add_routes(create_sidebar_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(loader, watch_patterns=config.live_reload.watch_patterns)
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_manager_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
