# ABOUTME: Shared pytest fixtures for Folio tests.
# ABOUTME: Provides image writers, a sample media root tree, and a temporary catalog.

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from folio.db.catalog import WorkCatalog
from folio.db.connection import open_catalog

ImageWriter = Callable[[Path, tuple[int, int]], Path]


def _write_image(path: Path, size: tuple[int, int]) -> Path:
    """Write a real image file whose format follows the path's extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 180, 160)).save(path)
    return path


@pytest.fixture
def write_image() -> ImageWriter:
    """Factory fixture: write_image(path, (width, height)) -> path."""
    return _write_image


@pytest.fixture
def catalog(tmp_path: Path) -> WorkCatalog:
    """Provide a WorkCatalog backed by a temporary database."""
    conn = open_catalog(tmp_path / "catalog.db")
    yield WorkCatalog(conn)
    conn.close()


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    """Create a media root with a mix of well-formed and damaged works.

    Layout:
        media/
            Alpha/                  meta.json (title, category, tags, date)
                page1.png  100x200
                page2.png  100x200
                page10.png 300x150
                notes.txt
            beta/                   no sidecar
                01.jpg     64x64
                02.jpg     (corrupt)
            gamma/                  only sidecar is invalid JSON
                bad.json
                cover.png  50x50
            .hidden/                ignored
                x.png
            readme.txt              plain file, ignored
    """
    root = tmp_path / "media"

    alpha = root / "Alpha"
    alpha.mkdir(parents=True)
    (alpha / "meta.json").write_text(
        json.dumps(
            {
                "title": "Alpha Story",
                "category": "manga",
                "tags": ["  A ", "", "b"],
                "released": "2023-04-05",
            }
        ),
        encoding="utf-8",
    )
    _write_image(alpha / "page1.png", (100, 200))
    _write_image(alpha / "page2.png", (100, 200))
    _write_image(alpha / "page10.png", (300, 150))
    (alpha / "notes.txt").write_text("not a page")

    beta = root / "beta"
    beta.mkdir()
    _write_image(beta / "01.jpg", (64, 64))
    (beta / "02.jpg").write_bytes(b"definitely not a jpeg")

    gamma = root / "gamma"
    gamma.mkdir()
    (gamma / "bad.json").write_text("{ this is not json", encoding="utf-8")
    _write_image(gamma / "cover.png", (50, 50))

    hidden = root / ".hidden"
    hidden.mkdir()
    _write_image(hidden / "x.png", (10, 10))

    (root / "readme.txt").write_text("plain file")

    return root
