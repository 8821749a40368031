"""Configuration management for sitenav.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "sitenav.toml"

VALIDATION_MODES = ("fail-fast", "collect-all")


@dataclass(frozen=True)
class SiteConfig:
    """Site metadata passed to renderers."""

    title: str = "Documentation"
    tagline: str = ""
    url: str | None = None
    base_url: str = "/"
    organization: str | None = None
    project: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "tagline": self.tagline,
            "url": self.url,
            "baseUrl": self.base_url,
            "organization": self.organization,
            "project": self.project,
        }


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Documentation sources configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    sidebars_file: Path = field(default_factory=lambda: Path("sidebars.json"))


@dataclass
class ValidationConfig:
    """Sidebar validation configuration."""

    mode: str = "fail-fast"

    @property
    def collect_all(self) -> bool:
        return self.mode == "collect-all"


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class Config:
    """Application configuration."""

    site: SiteConfig
    server: ServerConfig
    docs: DocsConfig
    validation: ValidationConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for sitenav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(
            site=SiteConfig(),
            server=ServerConfig(),
            docs=DocsConfig(),
            validation=ValidationConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid configuration file {path}: {e}") from e

        config_dir = path.parent

        return cls(
            site=cls._parse_site(data.get("site")),
            server=cls._parse_server(data.get("server")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            validation=cls._parse_validation(data.get("validation")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site metadata section."""
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        title = data.get("title", "Documentation")
        if not isinstance(title, str) or not title:
            raise ValueError("site.title must be a non-empty string")

        tagline = data.get("tagline", "")
        if not isinstance(tagline, str):
            raise ValueError("site.tagline must be a string")

        base_url = data.get("base_url", "/")
        if not isinstance(base_url, str) or not base_url.startswith("/"):
            raise ValueError("site.base_url must be a string starting with '/'")

        optional: dict[str, str | None] = {}
        for key in ("url", "organization", "project"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"site.{key} must be a string")
            optional[key] = value

        return SiteConfig(title=title, tagline=tagline, base_url=base_url, **optional)

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(
                source_dir=config_dir / "docs",
                sidebars_file=config_dir / "sidebars.json",
            )

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        source_dir = data.get("source_dir", "docs")
        if not isinstance(source_dir, str):
            raise ValueError("docs.source_dir must be a string")

        sidebars_file = data.get("sidebars_file", "sidebars.json")
        if not isinstance(sidebars_file, str):
            raise ValueError("docs.sidebars_file must be a string")

        return DocsConfig(
            source_dir=config_dir / source_dir,
            sidebars_file=config_dir / sidebars_file,
        )

    @classmethod
    def _parse_validation(cls, data: object) -> ValidationConfig:
        """Parse validation configuration section."""
        if data is None:
            return ValidationConfig()

        if not isinstance(data, dict):
            raise ValueError("validation section must be a dictionary")

        mode = data.get("mode", "fail-fast")
        if mode not in VALIDATION_MODES:
            raise ValueError(f"validation.mode must be one of: {', '.join(VALIDATION_MODES)}")

        return ValidationConfig(mode=mode)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live_reload configuration section.

        Args:
            data: Raw live_reload section data

        Returns:
            LiveReloadConfig instance
        """
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        sidebars_file: Path | None = None,
        validation_mode: str | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if source_dir is not None or sidebars_file is not None:
            docs = replace(
                self.docs,
                source_dir=source_dir if source_dir is not None else self.docs.source_dir,
                sidebars_file=(
                    sidebars_file if sidebars_file is not None else self.docs.sidebars_file
                ),
            )

        validation = self.validation
        if validation_mode is not None:
            if validation_mode not in VALIDATION_MODES:
                raise ValueError(
                    f"validation.mode must be one of: {', '.join(VALIDATION_MODES)}",
                )
            validation = replace(self.validation, mode=validation_mode)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            docs=docs,
            validation=validation,
            live_reload=live_reload,
        )
