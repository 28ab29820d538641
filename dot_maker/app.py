"""Main Textual application for the dot_maker TUI."""

from __future__ import annotations

import logging
import random
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Static,
)
from textual.worker import get_current_worker

from dot_maker.core.processor import DotResult, Settings, generate
from dot_maker.core.reader import PixelBuffer, load_image
from dot_maker.tui.controls import ControlPanel
from dot_maker.tui.preview import DotPreview
from dot_maker.utils.cache import ResultCache

logger = logging.getLogger(__name__)


class SaveScreen(ModalScreen[str | None]):
    """Modal screen for choosing the export path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    SaveScreen {
        align: center middle;
    }

    SaveScreen #save-dialog {
        width: 60;
        height: 12;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    SaveScreen #save-title {
        text-style: bold;
        margin-bottom: 1;
    }

    SaveScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    SaveScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, default_path: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Export (.svg, .png, .jpg)", id="save-title")
            yield Label("Output file path:")
            yield Input(
                value=self._default_path,
                placeholder="dot_image.svg",
                id="save-path",
            )
            with Horizontal(classes="button-row"):
                yield Button("Save", variant="primary", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            path_input = self.query_one("#save-path", Input)
            self.dismiss(path_input.value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class OpenFileScreen(ModalScreen[str | None]):
    """Simple modal for entering an image path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    OpenFileScreen {
        align: center middle;
    }

    OpenFileScreen #open-dialog {
        width: 60;
        height: 10;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    OpenFileScreen #open-title {
        text-style: bold;
        margin-bottom: 1;
    }

    OpenFileScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    OpenFileScreen Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="open-dialog"):
            yield Static("Open Image", id="open-title")
            yield Input(placeholder="Path to an image file...", id="file-input")
            with Horizontal(classes="button-row"):
                yield Button("Open", variant="primary", id="btn-open")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            inp = self.query_one("#file-input", Input)
            self.dismiss(inp.value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class DotMakerApp(App):
    """Main TUI application."""

    TITLE = "dot_maker"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("s", "save", "Export", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(self, input_path: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._buffer: PixelBuffer | None = None
        self._image_path: Path | None = None
        self._cache = ResultCache(max_size=32)
        self._settings = Settings(seed=random.randrange(2**32))
        self._panel_visible = True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield DotPreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)

    def _load_file(self, path: str) -> None:
        """Load an image and generate its first preview."""
        try:
            self._buffer = load_image(path)
        except (ValueError, OSError) as e:
            self._update_status(f"Error: {e}")
            return
        self._image_path = Path(path)
        self.title = f"dot_maker - {self._image_path.name}"
        self._cache.clear()
        self.query_one(DotPreview).clear()
        self._update_status(
            f"Loaded {self._image_path.name} ({self._buffer.width}x{self._buffer.height})"
        )
        self._generate_preview()

    def _update_status(self, text: str) -> None:
        try:
            status = self.query_one("#status-bar", Static)
            status.update(text)
        except Exception:
            pass

    @work(thread=True, exclusive=True, group="preview")
    def _generate_preview(self) -> None:
        """Generate circles for the current settings in a background thread.

        Exclusive, so a newer settings change cancels the pending one.
        """
        if self._buffer is None:
            return

        worker = get_current_worker()
        buffer = self._buffer
        settings = self._settings
        image_key = str(self._image_path)
        cache_key = settings.hash()

        cached = self._cache.get(image_key, cache_key)
        if cached is not None:
            if not worker.is_cancelled:
                self.call_from_thread(self._display_result, cached)
            return

        self.call_from_thread(self._update_status, "Generating...")
        try:
            result = generate(buffer, settings)
        except ValueError as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Error: {e}")
            return

        self._cache.put(image_key, cache_key, result)
        if not worker.is_cancelled:
            self.call_from_thread(self._display_result, result)

    def _display_result(self, result: DotResult) -> None:
        """Display a result (called on main thread)."""
        self.query_one(DotPreview).update_result(result)

    # --- Actions ---

    def action_save(self) -> None:
        preview = self.query_one(DotPreview)
        if preview.current_result is None or self._image_path is None:
            self._update_status("Nothing to export")
            return
        default_path = str(self._image_path.parent / f"{self._image_path.stem}_dots.svg")
        self.push_screen(SaveScreen(default_path), self._on_save_result)

    def _on_save_result(self, path: str | None) -> None:
        result = self.query_one(DotPreview).current_result
        if path is None or result is None:
            return
        self._do_save(path, result)

    @work(thread=True, exclusive=True, group="save")
    def _do_save(self, output_path: str, result: DotResult) -> None:
        """Write a result to disk in a background thread."""
        from dot_maker.core.writer import save_output

        out = Path(output_path)
        try:
            save_output(result, out)
        except (ValueError, OSError) as e:
            self.call_from_thread(self._update_status, f"Save error: {e}")
            return
        logger.info("Saved %d circles to %s", len(result.circles), out)
        self.call_from_thread(self._update_status, f"Saved to {out}")

    def action_open_file(self) -> None:
        self.push_screen(OpenFileScreen(), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._load_file(path)

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_dot_preview_result_shown(self, event: DotPreview.ResultShown) -> None:
        result = event.result
        self._update_status(
            f"{len(result.circles)} circles in {result.elapsed_ms:.0f} ms "
            f"({result.width}x{result.height})"
        )

    def on_control_panel_settings_changed(
        self, event: ControlPanel.SettingsChanged
    ) -> None:
        self._settings = event.settings
        if self._buffer is not None:
            self._generate_preview()


def run_app(input_path: str | None = None) -> None:
    """Launch the TUI application."""
    app = DotMakerApp(input_path=input_path)
    app.run()
