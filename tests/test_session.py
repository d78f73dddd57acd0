import asyncio

import pytest

from errors import DecodeError, RejectionError
from extract_colors import Swatch
from selection import SelectionState
from session import StyleGuideSession
from uploads import UploadedFile


def load(session, *files):
    return asyncio.run(session.upload(list(files)))


def test_upload_populates_swatches(logo_file):
    session = StyleGuideSession()
    assert load(session, logo_file)
    assert session.colors == ["#ff0000", "#0000ff", "#ffffff"]
    assert session.file == logo_file
    assert session.generation == 1
    assert session.drain_notices() == []


def test_rejected_file_becomes_notice(logo_file):
    session = StyleGuideSession()
    bad = UploadedFile(filename='anim.gif', content_type='image/gif', data=b'GIF89a')
    assert not load(session, bad)
    notices = session.drain_notices()
    assert [n.message for n in notices] == ["File anim.gif was rejected"]
    assert notices[0].level == 'error'
    assert session.generation == 0
    assert session.drain_notices() == []


def test_oversized_file_rejected(logo_file):
    session = StyleGuideSession(max_upload_bytes=10)
    assert not load(session, logo_file)
    assert "logo.png" in session.drain_notices()[0].message


def test_decode_failure_keeps_previous_state(logo_file, corrupt_png):
    session = StyleGuideSession()
    load(session, logo_file)
    session.click("#ff0000")
    session.click("#0000ff")

    broken = UploadedFile(filename='broken.png', content_type='image/png', data=corrupt_png)
    assert not load(session, broken)

    assert session.colors == ["#ff0000", "#0000ff", "#ffffff"]
    assert session.selection == SelectionState(primary="#ff0000", secondary="#0000ff")
    assert session.file == logo_file
    assert "broken.png" in session.drain_notices()[0].message


def test_svg_without_cairo_becomes_notice(logo_file, cairo_missing):
    session = StyleGuideSession()
    load(session, logo_file)
    session.click("#ff0000")

    svg = UploadedFile(filename='logo.svg', content_type='image/svg+xml',
                       data=b'<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"/>')
    assert not load(session, svg)

    assert session.colors == ["#ff0000", "#0000ff", "#ffffff"]
    assert session.selection == SelectionState(primary="#ff0000")
    assert session.file == logo_file
    notices = session.drain_notices()
    assert len(notices) == 1
    assert "logo.svg" in notices[0].message
    assert "SVG rendering is unavailable" in notices[0].message


def test_new_logo_resets_selection(logo_file, other_logo_file):
    session = StyleGuideSession()
    load(session, logo_file)
    session.click("#ff0000")
    load(session, other_logo_file)
    assert session.selection == SelectionState()
    assert session.file == other_logo_file


def test_stale_completion_is_dropped(logo_file, other_logo_file):
    session = StyleGuideSession()
    first = session.begin_upload([logo_file])
    second = session.begin_upload([other_logo_file])
    newer = [Swatch.from_rgb((0, 0, 0), 1.0)]
    older = [Swatch.from_rgb((255, 255, 255), 1.0)]

    assert session.complete_upload(second, newer)
    assert not session.complete_upload(first, older)
    assert session.colors == ["#000000"]
    assert session.file == other_logo_file


def test_stale_completion_before_newer_one(logo_file, other_logo_file):
    session = StyleGuideSession()
    first = session.begin_upload([logo_file])
    second = session.begin_upload([other_logo_file])

    assert not session.complete_upload(first, [Swatch.from_rgb((255, 255, 255), 1.0)])
    assert session.swatches == []
    assert session.complete_upload(second, [Swatch.from_rgb((0, 0, 0), 1.0)])


def test_stale_failure_is_silent(logo_file, other_logo_file):
    session = StyleGuideSession()
    first = session.begin_upload([logo_file])
    session.begin_upload([other_logo_file])
    session.fail_upload(first, DecodeError("bad"))
    assert session.drain_notices() == []


def test_concurrent_uploads_apply_latest(logo_file, other_logo_file):
    session = StyleGuideSession()

    async def run():
        return await asyncio.gather(session.upload([logo_file]), session.upload([other_logo_file]))

    first, second = asyncio.run(run())
    assert not first
    assert second
    assert session.file == other_logo_file
    assert len(session.swatches) == 5


def test_click_flow_and_rejection(logo_file):
    session = StyleGuideSession()
    load(session, logo_file)

    session.click("#ff0000")
    session.click("#0000ff")
    state = session.click("#ffffff")

    assert state == SelectionState(primary="#ff0000", secondary="#0000ff")
    assert [n.message for n in session.drain_notices()] == [
        "You can only select a primary and a secondary color."
    ]


def test_click_unknown_color(logo_file):
    session = StyleGuideSession()
    load(session, logo_file)
    session.click("#123456")
    assert session.selection == SelectionState()
    assert len(session.drain_notices()) == 1


def test_style_guide_requires_both_roles(logo_file):
    session = StyleGuideSession()
    load(session, logo_file)
    session.click("#ff0000")
    assert not session.can_generate
    with pytest.raises(RejectionError):
        session.style_guide()


def test_style_guide(logo_file):
    session = StyleGuideSession()
    load(session, logo_file)
    session.click("#0000ff")
    session.click("#ff0000")

    guide = session.style_guide(wordmark="ACME")
    assert guide.primary.hex == "#0000ff"
    assert guide.secondary.hex == "#ff0000"
    assert guide.wordmark == "ACME"
