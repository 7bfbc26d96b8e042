"""Pytest marker auto-assignment by folder and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pymupdf
import pytest

from formsense import logger

if TYPE_CHECKING:
    from collections.abc import Callable


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except OSError:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def build_pdf(pages: list[str], *, title: str | None = None) -> bytes:
    """Render one text page per entry into an in-memory PDF."""
    doc = pymupdf.open()
    try:
        for text in pages:
            page = doc.new_page(width=612, height=792)
            if text:
                page.insert_text((72, 72), text, fontsize=11)
        if title:
            doc.set_metadata({"title": title})
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def pdf_factory() -> Callable[..., bytes]:
    """Return a builder of text PDFs."""
    return build_pdf
