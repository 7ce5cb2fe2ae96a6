"""Diagram colour themes.

Themes are small colour palettes. Only ``bg`` and ``fg`` are required; the
remaining colours are derived from them when a theme leaves them out.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_THEME = "github-dark"

# Name that selects the renderer's own styling without a warning.
FALLBACK_THEME_NAME = "default"


@dataclass(frozen=True)
class ThemeSpec:
    """Colour palette passed to the diagram renderer."""

    bg: str
    fg: str
    line: str | None = None
    accent: str | None = None
    muted: str | None = None
    surface: str | None = None
    border: str | None = None

    def to_theme_variables(self) -> dict[str, str]:
        """Map the palette onto Mermaid ``base`` theme variables.

        Returns:
            Dictionary suitable for the ``themeVariables`` init option
        """
        line = self.line or self.fg
        accent = self.accent or line
        surface = self.surface or self.bg
        border = self.border or accent
        return {
            "background": self.bg,
            "mainBkg": surface,
            "primaryColor": surface,
            "primaryTextColor": self.fg,
            "primaryBorderColor": border,
            "secondaryColor": surface,
            "tertiaryColor": self.bg,
            "lineColor": line,
            "textColor": self.fg,
            "nodeBorder": border,
            "clusterBkg": self.bg,
            "clusterBorder": self.muted or border,
            "edgeLabelBackground": self.bg,
            "noteBkgColor": surface,
            "noteTextColor": self.fg,
            "noteBorderColor": self.muted or border,
        }


BUILTIN_THEMES: dict[str, ThemeSpec] = {
    "zinc-light": ThemeSpec(bg="#FFFFFF", fg="#27272A"),
    "zinc-dark": ThemeSpec(bg="#18181B", fg="#FAFAFA"),
    "tokyo-night": ThemeSpec(
        bg="#1a1b26", fg="#a9b1d6", line="#3d59a1", accent="#7aa2f7", muted="#565f89"
    ),
    "tokyo-night-storm": ThemeSpec(
        bg="#24283b", fg="#a9b1d6", line="#3d59a1", accent="#7aa2f7", muted="#565f89"
    ),
    "tokyo-night-light": ThemeSpec(
        bg="#d5d6db", fg="#343b58", line="#34548a", accent="#34548a", muted="#9699a3"
    ),
    "catppuccin-mocha": ThemeSpec(
        bg="#1e1e2e", fg="#cdd6f4", line="#585b70", accent="#cba6f7", muted="#6c7086"
    ),
    "catppuccin-latte": ThemeSpec(
        bg="#eff1f5", fg="#4c4f69", line="#9ca0b0", accent="#8839ef", muted="#9ca0b0"
    ),
    "nord": ThemeSpec(
        bg="#2e3440", fg="#d8dee9", line="#4c566a", accent="#88c0d0", muted="#616e88"
    ),
    "nord-light": ThemeSpec(
        bg="#eceff4", fg="#2e3440", line="#aab1c0", accent="#5e81ac", muted="#7b88a1"
    ),
    "dracula": ThemeSpec(
        bg="#282a36", fg="#f8f8f2", line="#6272a4", accent="#bd93f9", muted="#6272a4"
    ),
    "github-light": ThemeSpec(
        bg="#ffffff", fg="#1f2328", line="#d1d9e0", accent="#0969da", muted="#59636e"
    ),
    "github-dark": ThemeSpec(
        bg="#0d1117", fg="#e6edf3", line="#3d444d", accent="#4493f8", muted="#9198a1"
    ),
    "solarized-light": ThemeSpec(
        bg="#fdf6e3", fg="#657b83", line="#93a1a1", accent="#268bd2", muted="#93a1a1"
    ),
    "solarized-dark": ThemeSpec(
        bg="#002b36", fg="#839496", line="#586e75", accent="#268bd2", muted="#586e75"
    ),
    "one-dark": ThemeSpec(
        bg="#282c34", fg="#abb2bf", line="#4b5263", accent="#c678dd", muted="#5c6370"
    ),
}


class ThemeRegistry:
    """Lookup table from theme name to ThemeSpec.

    Built-in themes can be extended or overridden by themes declared in the
    configuration file.
    """

    def __init__(self, extra: Mapping[str, ThemeSpec] | None = None) -> None:
        self._themes: dict[str, ThemeSpec] = dict(BUILTIN_THEMES)
        if extra:
            self._themes.update(extra)

    def __iter__(self) -> Iterator[str]:
        """Iterate over theme names in registration order."""
        return iter(self._themes)

    def get(self, name: str) -> ThemeSpec | None:
        return self._themes.get(name)

    def resolve(self, name: str) -> ThemeSpec | None:
        """Look up a theme, falling back to the renderer default.

        An unknown name is not an error: a warning is logged and None is
        returned so the renderer uses its own styling. The name "default"
        selects that styling explicitly and logs nothing.

        Args:
            name: Theme name

        Returns:
            ThemeSpec, or None for the renderer default
        """
        theme = self.get(name)
        if theme is None and name != FALLBACK_THEME_NAME:
            logger.warning(f'Theme "{name}" not found, using default')
        return theme
