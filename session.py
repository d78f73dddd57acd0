"""
Interactive state of one style guide session.

The session owns the uploaded logo, its swatches, the color selection and
the notices shown to the user. Uploads are numbered; an analysis result is
only applied if no newer upload was submitted while it ran.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from errors import DecodeError, RejectionError
from extract_colors import MAX_COLORS, Swatch, analyze_bytes
from palette import StyleGuide, build_style_guide
from selection import SelectionState, click, is_complete
from uploads import DEFAULT_MAX_SIZE, UploadedFile, screen_uploads

logger = logging.getLogger(__name__)

INCOMPLETE_SELECTION = "Select a primary and a secondary color first."


@dataclass(frozen=True)
class Notice:
    level: str  # 'error' or 'info'
    message: str


@dataclass(frozen=True)
class PendingUpload:
    generation: int
    file: UploadedFile


class StyleGuideSession:
    def __init__(self, max_upload_bytes: int = DEFAULT_MAX_SIZE, max_colors: int = MAX_COLORS):
        self.max_upload_bytes = max_upload_bytes
        self.max_colors = max_colors
        self.file: Optional[UploadedFile] = None
        self.swatches: list[Swatch] = []
        self.selection = SelectionState()
        self.notices: list[Notice] = []
        self.generation = 0

    @property
    def colors(self) -> list[str]:
        return [s.hex for s in self.swatches]

    def notify(self, message: str, level: str = 'error') -> None:
        logger.info("Notice (%s): %s", level, message)
        self.notices.append(Notice(level=level, message=message))

    def drain_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def begin_upload(self, files: list[UploadedFile]) -> Optional[PendingUpload]:
        """
        Screen a drop of files and register the accepted one as the latest upload.

        Rejected files become notices; nothing else changes.
        """
        accepted, rejections = screen_uploads(files, self.max_upload_bytes)
        for rejection in rejections:
            self.notify(str(rejection))

        if not accepted:
            return None

        self.generation += 1
        return PendingUpload(generation=self.generation, file=accepted[0])

    def is_latest(self, pending: PendingUpload) -> bool:
        return pending.generation == self.generation

    def complete_upload(self, pending: PendingUpload, swatches: list[Swatch]) -> bool:
        """Apply analysis results if they belong to the latest upload."""
        if not self.is_latest(pending):
            logger.info("Dropping stale analysis of %s (generation %d, latest %d)",
                        pending.file.filename, pending.generation, self.generation)
            return False

        self.file = pending.file
        self.swatches = list(swatches)
        self.selection = SelectionState()
        return True

    def fail_upload(self, pending: PendingUpload, error: DecodeError) -> None:
        """Report a decode failure; previous swatches and selection are kept."""
        if not self.is_latest(pending):
            logger.info("Ignoring failure of stale upload %s: %s", pending.file.filename, error)
            return
        self.notify(f"Could not read {pending.file.filename}: {error}")

    async def upload(self, files: list[UploadedFile]) -> bool:
        """
        Screen, decode and analyze a dropped logo.

        Returns:
            True if the session now shows this logo's swatches
        """
        pending = self.begin_upload(files)
        if pending is None:
            return False

        try:
            swatches = await asyncio.to_thread(
                analyze_bytes, pending.file.data, pending.file.content_type, self.max_colors
            )
        except DecodeError as e:
            self.fail_upload(pending, e)
            return False

        return self.complete_upload(pending, swatches)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def click(self, color: str) -> SelectionState:
        """Toggle a swatch; rejected clicks become notices."""
        if color not in self.colors:
            self.notify(f"Color {color} is not part of the extracted palette.")
            return self.selection

        try:
            self.selection = click(self.selection, color)
        except RejectionError as e:
            self.notify(str(e))
        return self.selection

    @property
    def can_generate(self) -> bool:
        return self.file is not None and is_complete(self.selection)

    def style_guide(self, wordmark: Optional[str] = None) -> StyleGuide:
        """
        Build the style guide for the current selection.

        Raises:
            RejectionError: If no logo is loaded or a role is still empty
        """
        if not self.can_generate:
            raise RejectionError(INCOMPLETE_SELECTION)
        return build_style_guide(self.selection.primary, self.selection.secondary, wordmark=wordmark)
