# ABOUTME: Page scanner for work directories: ordered image list with pixel dimensions.
# ABOUTME: Uses Pillow for raster formats and the root element attributes for SVG.

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from folio.core.keys import SortKey, derive_key, natural_key

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {".avif", ".bmp", ".gif", ".jpeg", ".jpg", ".png", ".svg", ".webp"}
)

_SVG_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$")


class ImageProbeError(Exception):
    """Raised when an image's dimensions cannot be determined."""


@dataclass
class PageEntry:
    """One image page of a work, as found on disk."""

    path: str
    page_index: int
    width: int | None = None
    height: int | None = None

    @property
    def ratio(self) -> float | None:
        """width / height, or None unless both are known and height > 0."""
        if self.width is None or self.height is None or self.height <= 0:
            return None
        return self.width / self.height


def _parse_svg_length(value: str | None) -> int | None:
    """Parse an absolute SVG length ("120", "120px", "120.5"); units like % are rejected."""
    if value is None:
        return None
    m = _SVG_LENGTH_RE.match(value)
    if not m:
        return None
    return round(float(m.group(1)))


def _probe_svg(path: Path) -> tuple[int, int]:
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as exc:
        raise ImageProbeError(f"Failed to read image size: {path}: {exc}") from exc

    width = _parse_svg_length(root.get("width"))
    height = _parse_svg_length(root.get("height"))

    if (width is None or height is None) and root.get("viewBox"):
        parts = re.split(r"[\s,]+", root.get("viewBox", "").strip())
        if len(parts) == 4:
            try:
                width = width if width is not None else round(float(parts[2]))
                height = height if height is not None else round(float(parts[3]))
            except ValueError:
                pass

    if width is None or height is None:
        raise ImageProbeError(f"Failed to read image size: {path}: no usable width/height")
    return width, height


def probe_dimensions(path: Path) -> tuple[int, int]:
    """Read an image's pixel dimensions without decoding pixel data.

    Raises:
        ImageProbeError: If the file is unreadable or not a recognized image.
    """
    if path.suffix.lower() == ".svg":
        return _probe_svg(path)

    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageProbeError(f"Failed to read image size: {path}: {exc}") from exc
    return width, height


def is_image(name: str) -> bool:
    """Check whether a file name has a recognized image extension (case-insensitive)."""
    return Path(name).suffix.lower() in IMAGE_EXTENSIONS


def scan_pages(
    root: Path,
    directory: Path,
    file_names: Iterable[str],
    sort_key: SortKey = natural_key,
    errors: list[tuple[Path, str]] | None = None,
) -> list[PageEntry]:
    """Enumerate and measure the image pages of a work directory.

    Images are ordered by sort_key and indexed from 0. A page whose
    dimensions cannot be probed is kept, with width and height left None.

    Args:
        root: The scan root; page paths are relative to it.
        directory: The work directory.
        file_names: Names of the regular files in the work directory.
        sort_key: Page ordering.
        errors: If given, (path, message) pairs for failed probes are appended.

    Returns:
        PageEntry list in page order.
    """
    names = sorted((name for name in file_names if is_image(name)), key=sort_key)

    pages: list[PageEntry] = []
    for index, name in enumerate(names):
        image_path = directory / name
        entry = PageEntry(path=derive_key(root, image_path), page_index=index)
        try:
            entry.width, entry.height = probe_dimensions(image_path)
        except ImageProbeError as exc:
            logger.warning("%s", exc)
            if errors is not None:
                errors.append((image_path, str(exc)))
        pages.append(entry)

    return pages
