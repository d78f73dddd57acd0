"""
Contrast decisions, shade ramps and textual RGB/HSL values for a base color.

All functions take hex strings (``#rrggbb``, ``rrggbb`` or ``#rgb``) and are
pure: the same input always gives the same output.
"""

import re

import numpy as np

from extract_colors import lab_to_linear_rgb, lab_to_rgb, rgb_to_hex, rgb_to_hsl, rgb_to_lab


# =============================================================================
# Constants
# =============================================================================

DARK_TEXT = "#000"
LIGHT_TEXT = "#fff"
LUMINANCE_THRESHOLD = 0.5  # Above this, dark text reads better

SHADE_STEP = 18.0  # L* units per unit of brighten/darken
# Step label -> brighten (+) / darken (-) amount. 500 is the base color itself.
SHADE_FACTORS = {
    50: 3.0,
    100: 2.5,
    200: 2.0,
    300: 1.5,
    400: 1.0,
    500: 0.0,
    600: -0.5,
    700: -1.0,
    800: -1.5,
    900: -2.0,
    950: -3.0,
}
SHADE_KEYS = tuple(SHADE_FACTORS)

GAMUT_SEARCH_STEPS = 24  # Bisection steps when pulling chroma into sRGB
GAMUT_TOLERANCE = 1e-4

HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$')


# =============================================================================
# Parsing
# =============================================================================

def parse_hex(color: str) -> tuple[int, int, int]:
    """Parse a hex color into 8-bit (r, g, b)."""
    match = HEX_PATTERN.match(color.strip()) if isinstance(color, str) else None
    if not match:
        raise ValueError(f"Invalid hex color: {color!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)

    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def normalize_hex(color: str) -> str:
    """Return the canonical lowercase #rrggbb form."""
    return rgb_to_hex(parse_hex(color))


def color_to_lab(color: str) -> np.ndarray:
    return rgb_to_lab(np.array([parse_hex(color)]))[0]


def perceived_lightness(color: str) -> float:
    """CIE L* (0-100) of a hex color."""
    return float(color_to_lab(color)[0])


# =============================================================================
# Luminance & Contrast
# =============================================================================

def relative_luminance(color: str) -> float:
    """WCAG relative luminance (0-1) of a hex color."""
    channels = [c / 255 for c in parse_hex(color)]
    r, g, b = [c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4 for c in channels]
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_text_color(background: str) -> str:
    """Return black or white text color for a background."""
    return DARK_TEXT if relative_luminance(background) > LUMINANCE_THRESHOLD else LIGHT_TEXT


def contrast_ratio(color_a: str, color_b: str) -> float:
    """WCAG contrast ratio between two colors (1-21)."""
    l1 = relative_luminance(color_a)
    l2 = relative_luminance(color_b)
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def wcag_level(ratio: float) -> str:
    if ratio >= 7:
        return "AAA"
    elif ratio >= 4.5:
        return "AA"
    elif ratio >= 3:
        return "AA-large"
    return "fail"


# =============================================================================
# Shade Ramp
# =============================================================================

def in_gamut(lab: np.ndarray) -> bool:
    rgb = lab_to_linear_rgb(lab)
    return bool(np.all(rgb >= -GAMUT_TOLERANCE) and np.all(rgb <= 1 + GAMUT_TOLERANCE))


def fit_to_gamut(lab: np.ndarray) -> np.ndarray:
    """
    Scale chroma (a, b) toward the neutral axis until the color is in sRGB.

    Lightness is left untouched, so a ramp built from increasing L* stays
    ordered after gamut mapping. The neutral axis is always in gamut.
    """
    if in_gamut(lab):
        return lab

    lo, hi = 0.0, 1.0
    for _ in range(GAMUT_SEARCH_STEPS):
        mid = (lo + hi) / 2
        if in_gamut(np.array([lab[0], lab[1] * mid, lab[2] * mid])):
            lo = mid
        else:
            hi = mid

    return np.array([lab[0], lab[1] * lo, lab[2] * lo])


def shift_lightness(lab: np.ndarray, delta: float) -> str:
    """Move a LAB color by delta L* units and return it as hex."""
    target = np.array([np.clip(lab[0] + delta, 0.0, 100.0), lab[1], lab[2]])
    return rgb_to_hex(lab_to_rgb(fit_to_gamut(target))[0])


def brighten(color: str, amount: float = 1.0) -> str:
    return shift_lightness(color_to_lab(color), SHADE_STEP * amount)


def darken(color: str, amount: float = 1.0) -> str:
    return shift_lightness(color_to_lab(color), -SHADE_STEP * amount)


def shade_ramp(color: str) -> dict[int, str]:
    """
    Derive the 50-950 shade ramp of a base color.

    Returns:
        Dict of step label -> hex, ordered lightest (50) to darkest (950).
        Step 500 is the base color itself.
    """
    base = normalize_hex(color)

    ramp = {}
    for key, factor in SHADE_FACTORS.items():
        if factor > 0:
            ramp[key] = brighten(base, factor)
        elif factor < 0:
            ramp[key] = darken(base, -factor)
        else:
            ramp[key] = base
    return ramp


# =============================================================================
# Formatting
# =============================================================================

def format_rgb(color: str) -> str:
    """Format as "(R, G, B)"."""
    r, g, b = parse_hex(color)
    return f"({r}, {g}, {b})"


def format_hsl(color: str) -> str:
    """Format as "(H, S%, L%)" with integer degrees and percentages."""
    hue, saturation, lightness = rgb_to_hsl(*parse_hex(color))
    return f"({round(hue) % 360}, {round(saturation * 100)}%, {round(lightness * 100)}%)"
