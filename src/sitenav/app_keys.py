"""Application keys for type-safe app configuration access."""

from aiohttp import web

from sitenav.config import SiteConfig
from sitenav.core.loader import SidebarLoader

sidebar_loader_key = web.AppKey("sidebar_loader", SidebarLoader)
site_config_key = web.AppKey("site_config", SiteConfig)
live_reload_enabled_key = web.AppKey("live_reload_enabled", bool)
