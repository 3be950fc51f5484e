from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from ..config import DEFAULT_COVER_THEME, DEFAULT_LAYOUT


# selector -> {css property: value}
StyleRules = Mapping[str, Mapping[str, str]]


@dataclass(frozen=True)
class LayoutTemplate:
    id: str
    display_name: str
    description: str
    icon: str
    style_rules: StyleRules


@dataclass(frozen=True)
class ColorTheme:
    id: str
    display_name: str
    background_color: str
    foreground_color: str


BASE_RULES: Dict[str, Dict[str, str]] = {
    "*": {"margin": "0", "padding": "0", "box-sizing": "border-box"},
    "body": {"color": "#333", "background": "#fff"},
    ".page": {
        "width": "100%",
        "min-height": "100vh",
        "page-break-after": "always",
        "display": "flex",
        "flex-direction": "column",
        "align-items": "center",
        "justify-content": "center",
    },
    ".page:last-child": {"page-break-after": "auto"},
    ".cover-photo": {
        "max-width": "200px",
        "max-height": "200px",
        "object-fit": "cover",
        "border-radius": "50%",
        "margin-bottom": "24px",
        "border": "4px solid rgba(255,255,255,0.5)",
    },
    ".date-range": {"font-size": "14px", "margin-top": "8px"},
}

CLASSIC_RULES: Dict[str, Dict[str, str]] = {
    "body": {"font-family": "Georgia, 'Times New Roman', serif"},
    ".title-page": {
        "background": "linear-gradient(135deg, #f5f0e8 0%, #e8e0d0 100%)",
        "text-align": "center",
        "padding": "40px",
        "border": "8px double #8b7355",
        "margin": "20px",
    },
    ".title-page h1": {
        "font-size": "42px",
        "font-weight": "400",
        "font-style": "italic",
        "margin-bottom": "16px",
        "color": "#4a3728",
    },
    ".title-page .subtitle": {"font-size": "18px", "color": "#6b5a4a"},
    ".photo-page": {"padding": "30px", "border": "4px solid #d4c4b0", "margin": "20px"},
    ".photo": {
        "max-width": "100%",
        "max-height": "55vh",
        "object-fit": "contain",
        "border": "2px solid #8b7355",
        "box-shadow": "0 4px 12px rgba(0, 0, 0, 0.15)",
    },
    ".milestone-badge": {
        "background": "#c9a959",
        "color": "#4a3728",
        "padding": "8px 20px",
        "font-size": "14px",
        "font-style": "italic",
        "margin-bottom": "16px",
        "border": "1px solid #8b7355",
    },
    ".milestone-page h2": {
        "font-size": "26px",
        "margin-top": "16px",
        "color": "#4a3728",
        "font-weight": "400",
        "font-style": "italic",
    },
    ".caption": {
        "font-size": "16px",
        "color": "#4a3728",
        "margin-top": "16px",
        "text-align": "center",
        "max-width": "80%",
        "font-style": "italic",
    },
    ".date": {"font-size": "14px", "color": "#8b7355", "margin-top": "8px"},
    ".blank-page": {"background": "#faf8f5", "border": "2px solid #d4c4b0", "margin": "20px"},
}

MODERN_RULES: Dict[str, Dict[str, str]] = {
    "body": {"font-family": "-apple-system, BlinkMacSystemFont, 'Helvetica Neue', Arial, sans-serif"},
    ".title-page": {"background": "#000", "text-align": "center", "padding": "60px"},
    ".title-page h1": {
        "font-size": "48px",
        "font-weight": "200",
        "letter-spacing": "4px",
        "margin-bottom": "20px",
        "color": "#fff",
        "text-transform": "uppercase",
    },
    ".title-page .subtitle": {
        "font-size": "16px",
        "color": "#999",
        "letter-spacing": "2px",
        "text-transform": "uppercase",
    },
    ".photo-page": {"padding": "0"},
    ".photo": {"max-width": "100%", "max-height": "75vh", "object-fit": "cover", "width": "100%"},
    ".milestone-badge": {
        "background": "#222",
        "color": "#fff",
        "padding": "10px 24px",
        "font-size": "11px",
        "font-weight": "600",
        "letter-spacing": "2px",
        "text-transform": "uppercase",
        "margin-bottom": "16px",
    },
    ".milestone-page h2": {
        "font-size": "28px",
        "margin-top": "16px",
        "color": "#000",
        "font-weight": "300",
        "letter-spacing": "1px",
    },
    ".caption": {
        "font-size": "15px",
        "color": "#333",
        "margin-top": "20px",
        "text-align": "center",
        "max-width": "70%",
        "line-height": "1.6",
    },
    ".date": {
        "font-size": "12px",
        "color": "#999",
        "margin-top": "12px",
        "letter-spacing": "1px",
        "text-transform": "uppercase",
    },
    ".blank-page": {"background": "#f5f5f5"},
}

PLAYFUL_RULES: Dict[str, Dict[str, str]] = {
    "body": {"font-family": "'Comic Sans MS', 'Chalkboard', 'Marker Felt', sans-serif"},
    ".title-page": {
        "background": "linear-gradient(135deg, #ffecd2 0%, #fcb69f 100%)",
        "text-align": "center",
        "padding": "40px",
        "border-radius": "30px",
        "margin": "20px",
    },
    ".title-page h1": {
        "font-size": "38px",
        "font-weight": "700",
        "margin-bottom": "16px",
        "color": "#e74c3c",
        "text-shadow": "2px 2px 0 #fff",
    },
    ".title-page .subtitle": {"font-size": "18px", "color": "#c0392b"},
    ".photo-page": {
        "padding": "20px",
        "background": "linear-gradient(135deg, #a8edea 0%, #fed6e3 100%)",
        "border-radius": "20px",
        "margin": "15px",
    },
    ".photo": {
        "max-width": "100%",
        "max-height": "55vh",
        "object-fit": "contain",
        "border-radius": "20px",
        "border": "4px solid #fff",
        "box-shadow": "0 8px 20px rgba(0, 0, 0, 0.15)",
    },
    ".milestone-badge": {
        "background": "linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
        "color": "#fff",
        "padding": "10px 24px",
        "border-radius": "20px",
        "font-size": "14px",
        "font-weight": "700",
        "margin-bottom": "16px",
        "box-shadow": "0 4px 10px rgba(240, 87, 108, 0.3)",
    },
    ".milestone-page h2": {"font-size": "24px", "margin-top": "16px", "color": "#9b59b6"},
    ".caption": {
        "font-size": "16px",
        "color": "#2c3e50",
        "margin-top": "16px",
        "text-align": "center",
        "max-width": "85%",
        "background": "rgba(255,255,255,0.8)",
        "padding": "12px 16px",
        "border-radius": "12px",
    },
    ".date": {"font-size": "14px", "color": "#7f8c8d", "margin-top": "8px"},
    ".blank-page": {
        "background": "linear-gradient(135deg, #ffecd2 0%, #fcb69f 100%)",
        "border-radius": "20px",
        "margin": "15px",
    },
}


def _merge_rules(*layers: Mapping[str, Mapping[str, str]]) -> StyleRules:
    merged: Dict[str, Dict[str, str]] = {}
    for layer in layers:
        for selector, declarations in layer.items():
            merged.setdefault(selector, {}).update(declarations)
    return MappingProxyType({sel: MappingProxyType(decl) for sel, decl in merged.items()})


LAYOUTS: Tuple[LayoutTemplate, ...] = (
    LayoutTemplate(
        id="classic",
        display_name="Classic",
        description="Timeless elegance with serif fonts and clean borders",
        icon="📖",
        style_rules=_merge_rules(BASE_RULES, CLASSIC_RULES),
    ),
    LayoutTemplate(
        id="modern",
        display_name="Modern",
        description="Minimalist design with sans-serif fonts and full-bleed photos",
        icon="🎨",
        style_rules=_merge_rules(BASE_RULES, MODERN_RULES),
    ),
    LayoutTemplate(
        id="playful",
        display_name="Playful",
        description="Fun and colorful with rounded corners and decorative elements",
        icon="🎈",
        style_rules=_merge_rules(BASE_RULES, PLAYFUL_RULES),
    ),
)

COVER_THEMES: Tuple[ColorTheme, ...] = (
    ColorTheme(id="coral", display_name="Coral", background_color="#FF6B6B", foreground_color="#FFFFFF"),
    ColorTheme(id="sage", display_name="Sage", background_color="#87A878", foreground_color="#FFFFFF"),
    ColorTheme(id="navy", display_name="Navy", background_color="#2C3E50", foreground_color="#FFFFFF"),
    ColorTheme(id="blush", display_name="Blush", background_color="#F5B7B1", foreground_color="#4A3728"),
    ColorTheme(id="gold", display_name="Gold", background_color="#C9A959", foreground_color="#4A3728"),
    ColorTheme(id="charcoal", display_name="Charcoal", background_color="#36454F", foreground_color="#FFFFFF"),
)


class ThemeRegistry:
    """Read-only catalog of layout templates and cover color themes.

    Lookups never fail: an unknown id resolves to the registry default so a
    stale or mistyped theme id still renders.
    """

    def __init__(
        self,
        layouts: Iterable[LayoutTemplate],
        cover_themes: Iterable[ColorTheme],
        default_layout: str = DEFAULT_LAYOUT,
        default_cover_theme: str = DEFAULT_COVER_THEME,
    ) -> None:
        self._layouts: Mapping[str, LayoutTemplate] = MappingProxyType({t.id: t for t in layouts})
        self._cover_themes: Mapping[str, ColorTheme] = MappingProxyType({t.id: t for t in cover_themes})
        if default_layout not in self._layouts:
            raise ValueError(f"Unknown default layout: {default_layout}")
        if default_cover_theme not in self._cover_themes:
            raise ValueError(f"Unknown default cover theme: {default_cover_theme}")
        self.default_layout = default_layout
        self.default_cover_theme = default_cover_theme

    @property
    def layouts(self) -> List[LayoutTemplate]:
        return list(self._layouts.values())

    @property
    def cover_themes(self) -> List[ColorTheme]:
        return list(self._cover_themes.values())

    def has_layout(self, layout_id: str) -> bool:
        return layout_id in self._layouts

    def has_cover_theme(self, theme_id: str) -> bool:
        return theme_id in self._cover_themes

    def get_layout(self, layout_id: str) -> LayoutTemplate:
        return self._layouts.get(layout_id) or self._layouts[self.default_layout]

    def get_layout_styles(self, layout_id: str) -> StyleRules:
        return self.get_layout(layout_id).style_rules

    def get_color_theme(self, theme_id: str) -> ColorTheme:
        return self._cover_themes.get(theme_id) or self._cover_themes[self.default_cover_theme]


DEFAULT_REGISTRY = ThemeRegistry(LAYOUTS, COVER_THEMES)


def get_layout_styles(layout_id: str) -> StyleRules:
    return DEFAULT_REGISTRY.get_layout_styles(layout_id)


def get_color_theme(theme_id: str) -> ColorTheme:
    return DEFAULT_REGISTRY.get_color_theme(theme_id)
