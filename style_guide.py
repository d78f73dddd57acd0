#!/usr/bin/env python3
"""
Style guide rendering and command line entry point.

Turns a logo and a primary/secondary color pair into a multi-page HTML
style guide (cover, logo placements, colors with shades, typography) or
a plain-text summary for the terminal.
"""

import asyncio
from html import escape
from typing import Optional

from palette import StyleGuide, typography_samples
from shades import contrast_text_color


NEUTRAL_BACKGROUND = "#e5e7eb"
# CSS filters that turn a logo into a white or a black silhouette
LOGO_ON_COLOR = "brightness(2) grayscale(1)"
LOGO_ON_NEUTRAL = "brightness(0) grayscale(1)"


# =============================================================================
# Text
# =============================================================================

def render_text(guide: StyleGuide) -> str:
    """Render the style guide as prose."""
    lines = []

    lines.append(guide.title.upper())
    if guide.wordmark:
        lines.append(f"Wordmark: {guide.wordmark}")
    lines.append("")

    lines.append("COLORS:")
    lines.append("")
    for profile in (guide.primary, guide.secondary):
        lines.append(f"[{profile.role.capitalize()}] {profile.hex}")
        lines.append(f"  RGB: {profile.rgb} | HSL: {profile.hsl} | Text: {profile.text_color}")
        lines.append("  Shades:")
        for step, hex_val in profile.shades.items():
            lines.append(f"    {step:>4}  {hex_val}")
        lines.append("")

    lines.append("TYPOGRAPHY:")
    lines.append("")
    for sample in typography_samples(guide):
        lines.append(f"  {sample.name:<10} {sample.size}px/{sample.weight} {sample.color} "
                     f"{sample.contrast_ratio:.1f}:1 (WCAG {sample.wcag_level})")

    return "\n".join(lines)


# =============================================================================
# HTML
# =============================================================================

CSS = """
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body {
        font-family: system-ui, -apple-system, sans-serif;
        background: #f7f6f5;
        color: #1f2937;
        line-height: 1.5;
        padding: 4rem 0;
    }
    .page {
        display: flex;
        width: 66rem;
        height: 51rem;
        margin: 0 auto 2rem;
        background: #fff;
        box-shadow: 0 2px 8px rgba(0,0,0,0.1);
        overflow: hidden;
    }
    .padded { padding: 2rem; gap: 2rem; }
    .logo-panel {
        display: flex;
        align-items: center;
        justify-content: center;
    }
    .logo-panel img { width: 250px; max-height: 250px; object-fit: contain; padding: 1rem; }
    .cover-title {
        width: 66%;
        display: flex;
        flex-direction: column;
        justify-content: flex-end;
        padding: 4rem;
    }
    .cover-title h1 { font-size: 4.5rem; font-weight: 600; line-height: 1.1; }
    .cover-title .wordmark { color: #9ca3af; font-size: 1.5rem; margin-top: 1rem; }
    .column { display: flex; flex-direction: column; gap: 2rem; }
    .section-title { width: 33%; padding: 3rem 2rem; }
    .section-title h2 { font-size: 2.25rem; font-weight: 600; }
    .section-title p { color: #9ca3af; margin-top: 1.5rem; }
    .colors { width: 67%; display: flex; flex-direction: column; padding: 3rem 2rem; gap: 1.5rem; }
    .color-block { padding: 1.25rem; font-size: 0.9rem; }
    .color-block .hex { font-size: 1.5rem; font-weight: 600; text-transform: uppercase; }
    .color-block .values { font-family: monospace; }
    .shades { display: flex; height: 4rem; }
    .shades .shade {
        flex: 1;
        display: flex;
        flex-direction: column;
        align-items: center;
        justify-content: center;
        font-size: 0.65rem;
        font-weight: 500;
    }
    .type-samples { width: 67%; padding: 3rem 2rem; display: flex; flex-direction: column; gap: 1rem; }
    .type-sample .meta { font-family: monospace; font-size: 0.75rem; color: #6b7280; }
"""


def render_logo(logo_url: Optional[str], css_filter: str) -> str:
    if not logo_url:
        return ''
    return f'<img src="{escape(logo_url)}" alt="Logo" style="filter:{css_filter}; mix-blend-mode:hard-light">'


def render_html(guide: StyleGuide, logo_url: Optional[str] = None) -> str:
    """
    Render the style guide as a standalone HTML document.

    Args:
        guide: Output of build_style_guide()
        logo_url: Image source for the logo, typically a data URL
    """
    primary = guide.primary
    secondary = guide.secondary
    title = escape(guide.title)

    lines = [
        '<!DOCTYPE html>',
        '<html lang="en">',
        '<head>',
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'  <title>{title}</title>',
        f'  <style>{CSS}</style>',
        '</head>',
        '<body>',
    ]

    # Page 1: cover
    lines.append('<section class="page" id="page1">')
    lines.append(f'  <div class="logo-panel" style="width:34%; background:{primary.hex}">'
                 f'{render_logo(logo_url, LOGO_ON_COLOR)}</div>')
    lines.append('  <div class="cover-title">')
    heading = title.replace(' ', '<br>', 1) if guide.title.count(' ') > 1 else title
    lines.append(f'    <h1>{heading}</h1>')
    if guide.wordmark:
        lines.append(f'    <p class="wordmark">{escape(guide.wordmark)}</p>')
    lines.append('  </div>')
    lines.append('</section>')

    # Page 2: logo placements
    lines.append('<section class="page padded" id="page2">')
    lines.append(f'  <div class="logo-panel" style="width:50%; background:{primary.hex}">'
                 f'{render_logo(logo_url, LOGO_ON_COLOR)}</div>')
    lines.append('  <div class="column" style="width:50%">')
    lines.append(f'    <div class="logo-panel" style="flex:1; background:{NEUTRAL_BACKGROUND}">'
                 f'{render_logo(logo_url, LOGO_ON_NEUTRAL)}</div>')
    lines.append(f'    <div class="logo-panel" style="flex:1; background:{secondary.hex}">'
                 f'{render_logo(logo_url, LOGO_ON_COLOR)}</div>')
    lines.append('  </div>')
    lines.append('</section>')

    # Page 3: colors and shades
    lines.append('<section class="page" id="page3">')
    lines.append('  <div class="section-title">')
    lines.append('    <h2>Colors</h2>')
    lines.append('    <p>Primary<br>Secondary<br>Shades</p>')
    lines.append('  </div>')
    lines.append('  <div class="colors">')
    for profile in (primary, secondary):
        lines.append(f'    <div class="color-block" style="background:{profile.hex}; color:{profile.text_color}">')
        lines.append(f'      <div class="role">{profile.role.capitalize()}</div>')
        lines.append(f'      <div class="hex">{profile.hex[1:]}</div>')
        lines.append(f'      <div class="values">RGB {profile.rgb} · HSL {profile.hsl}</div>')
        lines.append('    </div>')
        lines.append('    <div class="shades">')
        for step, hex_val in profile.shades.items():
            text_color = contrast_text_color(hex_val)
            lines.append(f'      <div class="shade" style="background:{hex_val}; color:{text_color}">'
                         f'<span>{step}</span><span>{hex_val[1:]}</span></div>')
        lines.append('    </div>')
    lines.append('  </div>')
    lines.append('</section>')

    # Page 4: typography
    lines.append('<section class="page" id="page4">')
    lines.append('  <div class="section-title">')
    lines.append('    <h2>Typography</h2>')
    lines.append('    <p>Type scale<br>Weights<br>Contrast</p>')
    lines.append('  </div>')
    lines.append('  <div class="type-samples">')
    sample_text = escape(guide.wordmark) if guide.wordmark else 'The quick brown fox'
    for sample in typography_samples(guide):
        lines.append('    <div class="type-sample">')
        lines.append(f'      <div style="font-size:{sample.size}px; font-weight:{sample.weight}; '
                     f'color:{sample.color}; line-height:1.2">{sample_text}</div>')
        lines.append(f'      <div class="meta">{sample.name} · {sample.size}px / {sample.weight} · '
                     f'{sample.color} · {sample.contrast_ratio:.1f}:1 {sample.wcag_level}</div>')
        lines.append('    </div>')
    lines.append('  </div>')
    lines.append('</section>')

    lines.append('</body>')
    lines.append('</html>')

    return '\n'.join(lines)


# =============================================================================
# CLI
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    import argparse
    import sys
    from pathlib import Path

    from errors import RejectionError, ServiceError
    from extract_colors import visualize_swatches
    from selection import role_of
    from session import StyleGuideSession
    from settings import get_settings
    from text_extraction import extract_logo_text, to_data_url
    from uploads import UploadedFile, resolve_content_type

    parser = argparse.ArgumentParser(
        description='Extract the colors of a logo and build a style guide.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Path to the logo (PNG, JPEG or SVG)'
    )
    parser.add_argument(
        '--primary', '-p',
        type=int,
        default=1,
        help='1-based index of the primary swatch (default: 1)'
    )
    parser.add_argument(
        '--secondary', '-s',
        type=int,
        default=2,
        help='1-based index of the secondary swatch (default: 2)'
    )
    parser.add_argument(
        '--output', '-o',
        nargs='?',
        const=True,
        default=None,
        help='Write HTML style guide. Optionally specify path, otherwise auto-names from input.'
    )
    parser.add_argument(
        '--swatches',
        default=None,
        help='Write a PNG strip of the extracted swatches to this path'
    )
    parser.add_argument(
        '--extract-text',
        action='store_true',
        help='Recognize the logo text with the OpenAI API and use it in the guide'
    )

    args = parser.parse_args(argv)
    image_path = Path(args.input)
    settings = get_settings()

    try:
        data = image_path.read_bytes()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    content_type = resolve_content_type(image_path.name, None) or ''
    upload = UploadedFile(filename=image_path.name, content_type=content_type, data=data)

    session = StyleGuideSession(max_upload_bytes=settings.max_upload_bytes)
    loaded = asyncio.run(session.upload([upload]))
    for notice in session.drain_notices():
        print(f"Error: {notice.message}", file=sys.stderr)
    if not loaded:
        return 1

    for index in (args.primary, args.secondary):
        if not 1 <= index <= len(session.swatches):
            print(f"Error: swatch {index} does not exist (found {len(session.swatches)})", file=sys.stderr)
            return 1
        session.click(session.swatches[index - 1].hex)
    for notice in session.drain_notices():
        print(f"Error: {notice.message}", file=sys.stderr)

    print("SWATCHES:")
    for i, swatch in enumerate(session.swatches, 1):
        role = role_of(session.selection, swatch.hex)
        marker = f"  ({role})" if role else ""
        print(f"  {i}. {swatch.hex}  {swatch.area * 100:5.1f}%{marker}")
    print()

    if args.swatches:
        visualize_swatches(session.swatches, args.swatches)

    wordmark = None
    if args.extract_text:
        try:
            wordmark = extract_logo_text(data, upload.content_type)
        except ServiceError as e:
            print(f"Warning: could not extract logo text: {e}", file=sys.stderr)

    try:
        guide = session.style_guide(wordmark=wordmark)
    except RejectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Always print prose to terminal
    print(render_text(guide))

    # Write HTML if requested
    if args.output:
        if args.output is True:
            output_path = image_path.with_name(f"{image_path.stem}-style-guide.html")
        else:
            output_path = Path(args.output)

        html = render_html(guide, to_data_url(data, upload.content_type))
        try:
            output_path.write_text(html, encoding="utf-8")
            print(f"\nWrote: {output_path}")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
