"""
Color profiles and typography samples for a primary/secondary color pair.
"""

from dataclasses import dataclass, field
from typing import Optional

from errors import RejectionError
from shades import (
    contrast_ratio, contrast_text_color, format_hsl, format_rgb,
    normalize_hex, relative_luminance, shade_ramp, wcag_level,
)

DEFAULT_TITLE = "Design Style Guide"
PAGE_BACKGROUND = "#ffffff"
FONT_FAMILY = "system-ui, -apple-system, 'Segoe UI', sans-serif"

# Sample name, size (px), weight, role, shade step
TYPE_SCALE = [
    ('Display', 72, 600, 'primary', 500),
    ('Heading 1', 48, 600, 'primary', 700),
    ('Heading 2', 36, 600, 'secondary', 700),
    ('Heading 3', 24, 500, 'secondary', 800),
    ('Body', 16, 400, 'primary', 950),
    ('Caption', 12, 400, 'secondary', 900),
]


@dataclass(frozen=True)
class ColorProfile:
    """Everything the style guide shows about one chosen color."""
    role: str  # 'primary' or 'secondary'
    hex: str
    text_color: str  # '#000' or '#fff'
    luminance: float
    rgb: str  # "(R, G, B)"
    hsl: str  # "(H, S%, L%)"
    shades: dict = field(default_factory=dict)  # step -> hex


@dataclass(frozen=True)
class TypeSample:
    name: str
    size: int
    weight: int
    color: str
    contrast_ratio: float
    wcag_level: str


@dataclass(frozen=True)
class StyleGuide:
    primary: ColorProfile
    secondary: ColorProfile
    title: str = DEFAULT_TITLE
    wordmark: Optional[str] = None  # Text recognized in the logo


def build_color_profile(color: str, role: str) -> ColorProfile:
    base = normalize_hex(color)
    return ColorProfile(
        role=role,
        hex=base,
        text_color=contrast_text_color(base),
        luminance=relative_luminance(base),
        rgb=format_rgb(base),
        hsl=format_hsl(base),
        shades=shade_ramp(base),
    )


def build_style_guide(primary: str, secondary: str, wordmark: Optional[str] = None,
                      title: str = DEFAULT_TITLE) -> StyleGuide:
    """
    Build the style guide content for a color pair.

    Raises:
        ValueError: If either color is not a hex color
        RejectionError: If both roles use the same color
    """
    primary_profile = build_color_profile(primary, 'primary')
    secondary_profile = build_color_profile(secondary, 'secondary')

    if primary_profile.hex == secondary_profile.hex:
        raise RejectionError("Primary and secondary colors must be different.")

    return StyleGuide(
        primary=primary_profile,
        secondary=secondary_profile,
        title=title,
        wordmark=wordmark or None,
    )


def typography_samples(guide: StyleGuide) -> list[TypeSample]:
    """Map the type scale onto the guide's shades, with contrast on the page."""
    samples = []
    for name, size, weight, role, step in TYPE_SCALE:
        profile = guide.primary if role == 'primary' else guide.secondary
        color = profile.shades[step]
        ratio = contrast_ratio(color, PAGE_BACKGROUND)
        samples.append(TypeSample(
            name=name,
            size=size,
            weight=weight,
            color=color,
            contrast_ratio=ratio,
            wcag_level=wcag_level(ratio),
        ))
    return samples
