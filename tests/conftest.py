"""Shared fixtures: small in-memory logos built with Pillow."""

import builtins
import io
from types import SimpleNamespace

import pytest
from PIL import Image, ImageDraw

from uploads import UploadedFile


def encode(img: Image.Image, fmt: str = 'PNG') -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_stripes(widths_and_colors, height: int = 10) -> Image.Image:
    """Vertical stripes, one per (width, rgb) pair."""
    total = sum(w for w, _ in widths_and_colors)
    img = Image.new('RGB', (total, height), (0, 0, 0))
    draw = ImageDraw.Draw(img)
    x = 0
    for width, color in widths_and_colors:
        draw.rectangle([x, 0, x + width - 1, height - 1], fill=color)
        x += width
    return img


@pytest.fixture()
def three_color_png() -> bytes:
    """50% red, 30% blue, 20% white."""
    img = make_stripes([(50, (255, 0, 0)), (30, (0, 0, 255)), (20, (255, 255, 255))])
    return encode(img)


@pytest.fixture()
def many_color_png() -> bytes:
    """Eight clearly distinct colors with distinct areas."""
    stripes = [
        (3, (255, 255, 0)),
        (20, (0, 0, 0)),
        (5, (0, 128, 0)),
        (17, (255, 0, 0)),
        (8, (0, 0, 255)),
        (12, (255, 255, 255)),
        (2, (255, 0, 255)),
        (10, (0, 255, 255)),
    ]
    return encode(make_stripes(stripes))


@pytest.fixture()
def transparent_png() -> bytes:
    return encode(Image.new('RGBA', (20, 20), (255, 0, 0, 0)))


@pytest.fixture()
def corrupt_png(three_color_png) -> bytes:
    return three_color_png[:60]


@pytest.fixture()
def logo_file(three_color_png) -> UploadedFile:
    return UploadedFile(filename='logo.png', content_type='image/png', data=three_color_png)


@pytest.fixture()
def other_logo_file(many_color_png) -> UploadedFile:
    return UploadedFile(filename='other.png', content_type='image/png', data=many_color_png)


@pytest.fixture()
def cairo_missing(monkeypatch):
    """Make `import cairosvg` fail the way it does when libcairo cannot be loaded."""
    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == 'cairosvg':
            raise OSError("no library called \"cairo-2\" was found")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, '__import__', fake_import)


class FakeCompletions:
    def __init__(self, content=None, error=None, choices=True):
        self.content = content
        self.error = error
        self.choices = choices
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Stands in for openai.OpenAI; only chat.completions.create is used."""

    def __init__(self, **kwargs):
        self.completions = FakeCompletions(**kwargs)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture()
def fake_openai():
    return FakeOpenAI
