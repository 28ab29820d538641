"""Terminal size helpers for the preview."""

from __future__ import annotations

import shutil


def get_terminal_size(
    fallback_width: int = 80,
    fallback_height: int = 24,
) -> tuple[int, int]:
    """Get current terminal size as (columns, rows)."""
    try:
        size = shutil.get_terminal_size(fallback=(fallback_width, fallback_height))
        return size.columns, size.lines
    except (ValueError, OSError):
        return fallback_width, fallback_height


def fit_to_terminal(
    img_width: int,
    img_height: int,
    max_width: int | None = None,
    max_height: int | None = None,
) -> tuple[int, int]:
    """Preview size in cells that fits the terminal and keeps aspect ratio.

    Each cell shows two vertically stacked pixels (half blocks), so a cell
    row covers two preview pixel rows and pixels come out roughly square.

    Args:
        img_width: image width in pixels.
        img_height: image height in pixels.
        max_width: maximum columns (defaults to terminal width).
        max_height: maximum rows (defaults to terminal height minus UI chrome).

    Returns:
        (columns, rows) tuple, each at least 1.
    """
    if max_width is None or max_height is None:
        tw, th = get_terminal_size()
        if max_width is None:
            max_width = tw
        if max_height is None:
            max_height = max(th - 4, 10)

    max_width = max(max_width, 1)
    max_height = max(max_height, 1)
    scale = min(max_width / img_width, (max_height * 2) / img_height)
    cols = max(1, min(max_width, int(img_width * scale)))
    rows = max(1, min(max_height, int(img_height * scale / 2)))
    return cols, rows
