#!/usr/bin/env python3
"""
Extract the dominant colors of a logo as swatches ranked by pixel area.
"""

import io
import logging
import math
from dataclasses import asdict, dataclass

import numpy as np
from PIL import Image

from errors import DecodeError

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

JND = 2.3  # Just Noticeable Difference in LAB units
BIN_SCALE = 5.0  # Bin size in JNDs (~12 LAB units)
MAX_COLORS = 5  # Swatches kept per image

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side

SAMPLE_PIXELS = 65_536  # Downsample larger images to roughly this many pixels
ALPHA_THRESHOLD = 128  # Pixels more transparent than this are background
SVG_RENDER_WIDTH = 512  # Raster width for SVG logos


# =============================================================================
# Color Conversion
# =============================================================================

def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB array (0-255) to LAB color space."""
    rgb_norm = rgb.astype(np.float64) / 255.0

    # Apply gamma correction
    mask = rgb_norm > 0.04045
    rgb_linear = np.where(mask, ((rgb_norm + 0.055) / 1.055) ** 2.4, rgb_norm / 12.92)

    # RGB to XYZ matrix
    r, g, b = rgb_linear[:, 0], rgb_linear[:, 1], rgb_linear[:, 2]
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    z = r * 0.0193339 + g * 0.1191920 + b * 0.9503041

    # XYZ to LAB (D65 reference white)
    xn, yn, zn = 0.95047, 1.0, 1.08883
    x, y, z = x / xn, y / yn, z / zn

    epsilon = 0.008856
    kappa = 903.3
    fx = np.where(x > epsilon, np.cbrt(x), (kappa * x + 16) / 116)
    fy = np.where(y > epsilon, np.cbrt(y), (kappa * y + 16) / 116)
    fz = np.where(z > epsilon, np.cbrt(z), (kappa * z + 16) / 116)

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b_val = 200 * (fy - fz)

    return np.column_stack([L, a, b_val])


def lab_to_linear_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert LAB array to unclipped linear RGB (in-gamut values are 0-1)."""
    if lab.ndim == 1:
        lab = lab.reshape(1, -1)

    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]

    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    epsilon = 0.008856
    kappa = 903.3

    x = np.where(fx**3 > epsilon, fx**3, (116 * fx - 16) / kappa)
    y = np.where(L > kappa * epsilon, ((L + 16) / 116) ** 3, L / kappa)
    z = np.where(fz**3 > epsilon, fz**3, (116 * fz - 16) / kappa)

    x = x * 0.95047
    z = z * 1.08883

    r = x * 3.2404542 - y * 1.5371385 - z * 0.4985314
    g = -x * 0.9692660 + y * 1.8760108 + z * 0.0415560
    b_out = x * 0.0556434 - y * 0.2040259 + z * 1.0572252

    return np.column_stack([r, g, b_out])


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert LAB array to RGB (0-255), clipping out-of-gamut channels."""
    rgb_linear = np.clip(lab_to_linear_rgb(lab), 0, 1)
    mask = rgb_linear > 0.0031308
    rgb = np.where(mask, 1.055 * np.power(rgb_linear, 1/2.4) - 0.055, 12.92 * rgb_linear)

    return np.clip(np.round(rgb * 255), 0, 255).astype(np.uint8)


def rgb_to_hex(rgb) -> str:
    """Convert an (r, g, b) triple (0-255) to a lowercase #rrggbb string."""
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """
    Convert 8-bit RGB to HSL.

    Returns:
        (hue in degrees 0-360, saturation 0-1, lightness 0-1)
    """
    r, g, b = r / 255, g / 255, b / 255
    c_max = max(r, g, b)
    c_min = min(r, g, b)
    lightness = (c_max + c_min) / 2

    # Achromatic
    if c_max == c_min:
        return 0.0, 0.0, lightness

    delta = c_max - c_min
    if lightness > 0.5:
        saturation = delta / (2 - c_max - c_min)
    else:
        saturation = delta / (c_max + c_min)

    if c_max == r:
        hue = (g - b) / delta + (6 if g < b else 0)
    elif c_max == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4

    return hue * 60, saturation, lightness


# =============================================================================
# Swatches
# =============================================================================

@dataclass(frozen=True)
class Swatch:
    """A dominant color and the share of the logo it covers."""
    hex: str
    red: int
    green: int
    blue: int
    hue: float  # 0-360
    saturation: float  # 0-1
    lightness: float  # 0-1
    intensity: float  # 0-1, saturation damped toward black and white
    area: float  # Fraction of counted pixels

    @classmethod
    def from_rgb(cls, rgb, area: float) -> 'Swatch':
        red, green, blue = (int(c) for c in rgb)
        hue, saturation, lightness = rgb_to_hsl(red, green, blue)
        intensity = saturation * (1 - abs(2 * lightness - 1))
        return cls(
            hex=rgb_to_hex((red, green, blue)),
            red=red,
            green=green,
            blue=blue,
            hue=hue,
            saturation=saturation,
            lightness=lightness,
            intensity=intensity,
            area=float(area),
        )

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# Decoding
# =============================================================================

def is_svg(data: bytes, content_type: str | None = None) -> bool:
    """Check whether upload bytes are an SVG document."""
    if content_type == 'image/svg+xml':
        return True
    head = data[:1024].lstrip().lower()
    return head.startswith(b'<svg') or (head.startswith(b'<?xml') and b'<svg' in head)


def rasterize_svg(data: bytes) -> bytes:
    """Render an SVG document to PNG bytes."""
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        raise DecodeError(f"SVG rendering is unavailable: {e}") from e

    try:
        return cairosvg.svg2png(bytestring=data, output_width=SVG_RENDER_WIDTH)
    except Exception as e:
        raise DecodeError(f"Could not render SVG: {e}") from e


def decode_image(data: bytes, content_type: str | None = None) -> Image.Image:
    """
    Decode uploaded bytes into a Pillow image.

    Raises:
        DecodeError: If the bytes are not a decodable image or exceed size limits
    """
    if not data:
        raise DecodeError("Image is empty")

    if is_svg(data, content_type):
        data = rasterize_svg(data)

    try:
        img = Image.open(io.BytesIO(data))
    except Exception as e:
        raise DecodeError(f"Could not open image: {e}") from e

    # Validate image dimensions before loading pixel data
    width, height = img.size
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise DecodeError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    if width * height > MAX_IMAGE_PIXELS:
        raise DecodeError(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )

    try:
        img.load()
    except Exception as e:
        raise DecodeError(f"Could not read image data: {e}") from e

    return img


# =============================================================================
# Extraction
# =============================================================================

def sample_pixels(img: Image.Image) -> np.ndarray:
    """Return opaque pixels as an (n, 3) RGB array, downsampled for large images."""
    rgba = img.convert('RGBA')
    width, height = rgba.size

    if width * height > SAMPLE_PIXELS:
        scale = math.sqrt(SAMPLE_PIXELS / (width * height))
        size = (max(1, int(width * scale)), max(1, int(height * scale)))
        rgba = rgba.resize(size, Image.Resampling.NEAREST)

    pixels = np.asarray(rgba).reshape(-1, 4)
    return pixels[pixels[:, 3] >= ALPHA_THRESHOLD][:, :3]


def extract_swatches(img: Image.Image, max_colors: int = MAX_COLORS) -> list[Swatch]:
    """
    Quantize logo pixels into perceptual bins and rank them by coverage.

    Args:
        img: Decoded image
        max_colors: Number of swatches to keep

    Returns:
        Swatches sorted by area descending, at most max_colors long.
        Similar colors in neighbouring bins are kept as separate swatches.
    """
    pixels = sample_pixels(img)
    if len(pixels) == 0:
        logger.debug("No opaque pixels to analyze")
        return []

    # Bin LAB values into JND-sized buckets
    bin_size = BIN_SCALE * JND
    binned = np.round(rgb_to_lab(pixels) / bin_size).astype(np.int32)
    unique_bins, inverse, counts = np.unique(
        binned, axis=0, return_inverse=True, return_counts=True
    )
    inverse = inverse.reshape(-1)

    # Represent each bin by the mean RGB of its pixels
    sums = np.zeros((len(unique_bins), 3), dtype=np.float64)
    np.add.at(sums, inverse, pixels.astype(np.float64))
    means = np.clip(np.round(sums / counts[:, None]), 0, 255).astype(np.int64)

    # Sort by pixel count descending
    order = np.argsort(-counts, kind='stable')[:max(0, max_colors)]
    total = len(pixels)

    swatches = [Swatch.from_rgb(means[i], counts[i] / total) for i in order]
    logger.debug("Extracted %d swatches from %d bins", len(swatches), len(unique_bins))
    return swatches


def analyze_bytes(data: bytes, content_type: str | None = None,
                  max_colors: int = MAX_COLORS) -> list[Swatch]:
    """Decode an uploaded logo and extract its dominant swatches."""
    img = decode_image(data, content_type)
    return extract_swatches(img, max_colors=max_colors)


def visualize_swatches(swatches: list[Swatch], output_path: str) -> None:
    """
    Create a strip image of the swatches with hex codes and coverage.

    Args:
        swatches: Output of extract_swatches()
        output_path: Path to save the output image
    """
    from PIL import ImageDraw

    from shades import contrast_text_color

    swatch_size = 80
    padding = 10
    text_height = 25
    cols = max(1, len(swatches))

    img_width = cols * (swatch_size + padding) + padding
    img_height = swatch_size + text_height + 2 * padding

    img = Image.new('RGB', (img_width, img_height), (240, 240, 240))
    draw = ImageDraw.Draw(img)

    for i, swatch in enumerate(swatches):
        x = padding + i * (swatch_size + padding)
        y = padding

        draw.rectangle([x, y, x + swatch_size, y + swatch_size],
                       fill=(swatch.red, swatch.green, swatch.blue))

        # Hex code inside the swatch, in a readable color
        label = swatch.hex[1:].upper()
        draw.text((x + 6, y + swatch_size - 16), label, fill=contrast_text_color(swatch.hex))

        # Center coverage under swatch
        text = f"{swatch.area * 100:.1f}%"
        bbox = draw.textbbox((0, 0), text)
        text_width = bbox[2] - bbox[0]
        text_x = x + (swatch_size - text_width) // 2
        draw.text((text_x, y + swatch_size + 4), text, fill=(0, 0, 0))

    img.save(output_path)
    logger.info("Saved swatch strip to %s", output_path)
