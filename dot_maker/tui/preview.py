"""Dot preview widget for the TUI."""

from __future__ import annotations

import numpy as np
from PIL import Image
from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from dot_maker.core.processor import DotResult
from dot_maker.core.writer import render_circles
from dot_maker.utils.terminal import fit_to_terminal

UPPER_HALF = "▀"

EMPTY_MESSAGE = "No image loaded. Press 'o' to open a file."


def half_block_text(img: Image.Image) -> Text:
    """Convert an RGB image to Rich Text, two pixel rows per text line.

    Each cell is an upper half block colored with the top pixel as
    foreground and the bottom pixel as background. An odd last row gets a
    white bottom half.
    """
    arr = np.array(img.convert("RGB"), dtype=np.uint8)
    h, w = arr.shape[:2]
    if h % 2:
        arr = np.concatenate([arr, np.full((1, w, 3), 255, dtype=np.uint8)])

    text = Text()
    for y in range(0, arr.shape[0], 2):
        if y > 0:
            text.append("\n")
        for x in range(w):
            tr, tg, tb = arr[y, x]
            br, bg, bb = arr[y + 1, x]
            text.append(
                UPPER_HALF,
                style=f"rgb({tr},{tg},{tb}) on rgb({br},{bg},{bb})",
            )
    return text


class DotPreview(Widget):
    """Widget that displays a generated circle list at terminal resolution."""

    DEFAULT_CSS = """
    DotPreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
    }

    DotPreview #preview-content {
        width: auto;
        height: auto;
    }
    """

    class ResultShown(Message):
        """Posted when a new result is displayed."""
        def __init__(self, result: DotResult) -> None:
            super().__init__()
            self.result = result

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._result: DotResult | None = None

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_MESSAGE, id="preview-content")

    def update_result(self, result: DotResult) -> None:
        """Render a result scaled to the widget's current size."""
        self._result = result
        content = self.query_one("#preview-content", Static)

        cols, rows = fit_to_terminal(
            result.width,
            result.height,
            max_width=(self.size.width or 80) - 2,
            max_height=(self.size.height or 24) - 2,
        )
        scale = min(cols / result.width, (rows * 2) / result.height)
        img = render_circles(result.circles, result.width, result.height, scale=scale)

        content.update(half_block_text(img))
        self.post_message(self.ResultShown(result))

    def clear(self) -> None:
        """Drop the shown result, e.g. when a new image is loading."""
        self._result = None
        content = self.query_one("#preview-content", Static)
        content.update(EMPTY_MESSAGE)

    @property
    def current_result(self) -> DotResult | None:
        return self._result
