"""Configuration management for Maidy.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

import httpx

from maidy.themes import DEFAULT_THEME, ThemeSpec

CONFIG_FILENAME = "maidy.toml"

_THEME_COLOR_KEYS = ("line", "accent", "muted", "surface", "border")


@dataclass
class RenderConfig:
    """Diagram rendering configuration."""

    theme: str = DEFAULT_THEME
    timeout: float | None = 30.0


@dataclass
class KrokiConfig:
    """Kroki server configuration."""

    url: str = "https://kroki.io"


@dataclass
class AsciiConfig:
    """ASCII renderer configuration."""

    command: str = "mermaid-ascii"


@dataclass
class DocumentConfig:
    """HTML document configuration."""

    title: str = "Document"
    include_styles: bool = True


@dataclass
class Config:
    """Application configuration."""

    render: RenderConfig = field(default_factory=RenderConfig)
    kroki: KrokiConfig = field(default_factory=KrokiConfig)
    ascii: AsciiConfig = field(default_factory=AsciiConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    themes: dict[str, ThemeSpec] = field(default_factory=dict)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for maidy.toml in current directory and parents.

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
            return cls()

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
    def _load_from_file(cls, path: Path) -> "Config":
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
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        return cls(
            render=cls._parse_render(data.get("render")),
            kroki=cls._parse_kroki(data.get("kroki")),
            ascii=cls._parse_ascii(data.get("ascii")),
            document=cls._parse_document(data.get("document")),
            themes=cls._parse_themes(data.get("themes")),
            config_path=path,
        )

    @classmethod
    def _parse_render(cls, data: object) -> RenderConfig:
        """Parse render configuration section.

        Args:
            data: Raw render section data

        Returns:
            RenderConfig instance
        """
        if data is None:
            return RenderConfig()

        if not isinstance(data, dict):
            raise ValueError("render section must be a dictionary")

        theme = data.get("theme", DEFAULT_THEME)
        if not isinstance(theme, str):
            raise ValueError("render.theme must be a string")

        timeout = data.get("timeout", 30.0)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ValueError("render.timeout must be a number")
        if timeout < 0:
            raise ValueError("render.timeout must not be negative")

        # 0 disables the per-diagram timeout
        return RenderConfig(theme=theme, timeout=float(timeout) or None)

    @classmethod
    def _parse_kroki(cls, data: object) -> KrokiConfig:
        if data is None:
            return KrokiConfig()

        if not isinstance(data, dict):
            raise ValueError("kroki section must be a dictionary")

        url = data.get("url", "https://kroki.io")
        if not isinstance(url, str):
            raise ValueError("kroki.url must be a string")

        return KrokiConfig(url=_validate_kroki_url(url))

    @classmethod
    def _parse_ascii(cls, data: object) -> AsciiConfig:
        if data is None:
            return AsciiConfig()

        if not isinstance(data, dict):
            raise ValueError("ascii section must be a dictionary")

        command = data.get("command", "mermaid-ascii")
        if not isinstance(command, str) or not command.strip():
            raise ValueError("ascii.command must be a non-empty string")

        return AsciiConfig(command=command)

    @classmethod
    def _parse_document(cls, data: object) -> DocumentConfig:
        """Parse document configuration section.

        Args:
            data: Raw document section data

        Returns:
            DocumentConfig instance
        """
        if data is None:
            return DocumentConfig()

        if not isinstance(data, dict):
            raise ValueError("document section must be a dictionary")

        title = data.get("title", "Document")
        if not isinstance(title, str):
            raise ValueError("document.title must be a string")

        include_styles = data.get("include_styles", True)
        if not isinstance(include_styles, bool):
            raise ValueError("document.include_styles must be a boolean")

        return DocumentConfig(title=title, include_styles=include_styles)

    @classmethod
    def _parse_themes(cls, data: object) -> dict[str, ThemeSpec]:
        """Parse user-defined themes.

        Each ``[themes.<name>]`` table needs ``bg`` and ``fg`` and may set
        any of the optional palette colours.

        Args:
            data: Raw themes section data

        Returns:
            Mapping of theme name to ThemeSpec
        """
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("themes section must be a dictionary")

        themes: dict[str, ThemeSpec] = {}
        for name, entry in data.items():
            if not isinstance(entry, dict):
                raise ValueError(f"themes.{name} must be a dictionary")

            bg = entry.get("bg")
            fg = entry.get("fg")
            if not isinstance(bg, str) or not isinstance(fg, str):
                raise ValueError(f"themes.{name} requires string bg and fg colors")

            optional: dict[str, str] = {}
            for key in _THEME_COLOR_KEYS:
                value = entry.get(key)
                if value is None:
                    continue
                if not isinstance(value, str):
                    raise ValueError(f"themes.{name}.{key} must be a string")
                optional[key] = value

            themes[name] = ThemeSpec(bg=bg, fg=fg, **optional)

        return themes

    def with_overrides(
        self,
        *,
        theme: str | None = None,
        kroki_url: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            theme: Override render.theme
            kroki_url: Override kroki.url

        Returns:
            New Config instance with overrides applied

        Raises:
            ValueError: If kroki_url is not an http(s) URL
        """
        render = self.render
        if theme is not None:
            render = replace(self.render, theme=theme)

        kroki = self.kroki
        if kroki_url is not None:
            kroki = replace(self.kroki, url=_validate_kroki_url(kroki_url))

        return replace(self, render=render, kroki=kroki)


def _validate_kroki_url(url: str) -> str:
    """Check that a Kroki server URL is usable.

    Args:
        url: Server URL from config or the command line

    Returns:
        The URL unchanged

    Raises:
        ValueError: If the URL cannot be parsed or is not http(s)
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"kroki.url is not a valid URL: {url} ({e})") from e

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"kroki.url must be an http or https URL: {url}")

    return url
