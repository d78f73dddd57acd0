"""
Screening of dropped logo files before they reach the color analyzer.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePath

from errors import RejectionError

logger = logging.getLogger(__name__)

# MIME type -> accepted extensions
ACCEPTED_TYPES = {
    'image/png': ('.png',),
    'image/jpeg': ('.jpg', '.jpeg'),
    'image/svg+xml': ('.svg',),
}
GENERIC_TYPES = {'', 'application/octet-stream'}
DEFAULT_MAX_SIZE = 4 * 1024 * 1024  # 4 MiB


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def resolve_content_type(filename: str, content_type: str | None) -> str | None:
    """Return the accepted MIME type of a file, or None if it is not accepted."""
    content_type = (content_type or '').split(';')[0].strip().lower()
    if content_type in ACCEPTED_TYPES:
        return content_type

    # Browsers and curl often send no useful type, fall back to the extension
    if content_type in GENERIC_TYPES:
        suffix = PurePath(filename or '').suffix.lower()
        for mime, extensions in ACCEPTED_TYPES.items():
            if suffix in extensions:
                return mime

    return None


def screen_upload(file: UploadedFile, max_size: int = DEFAULT_MAX_SIZE) -> UploadedFile:
    """
    Check a single file against the accepted types and size limit.

    Returns:
        The file with its content type resolved to an accepted MIME type.

    Raises:
        RejectionError: Naming the file, if it is not accepted
    """
    content_type = resolve_content_type(file.filename, file.content_type)
    if content_type is None:
        logger.info("Rejected %s: unsupported type %r", file.filename, file.content_type)
        raise RejectionError(f"File {file.filename} was rejected")

    if file.size > max_size:
        logger.info("Rejected %s: %d bytes exceeds %d", file.filename, file.size, max_size)
        raise RejectionError(f"File {file.filename} was rejected")

    return UploadedFile(filename=file.filename, content_type=content_type, data=file.data)


def screen_uploads(files: list[UploadedFile],
                   max_size: int = DEFAULT_MAX_SIZE) -> tuple[list[UploadedFile], list[RejectionError]]:
    """
    Screen a drop of one or more files.

    Only one logo is handled at a time: if more than one file passes
    screening, none of them is accepted.

    Returns:
        (accepted files, one rejection per refused file)
    """
    accepted = []
    rejections = []

    for file in files:
        try:
            accepted.append(screen_upload(file, max_size))
        except RejectionError as e:
            rejections.append(e)

    if len(accepted) > 1:
        rejections.append(RejectionError("Only one logo can be uploaded at a time"))
        accepted = []

    return accepted, rejections
