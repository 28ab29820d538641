"""Settings control panel for the TUI."""

from __future__ import annotations

import random

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import (
    Button,
    Input,
    Label,
    Select,
    Static,
)

from dot_maker.core.errors import InvalidParameter
from dot_maker.core.palette import ColorMode
from dot_maker.core.processor import HalftoneMode, Settings

# field -> (label, min, max, step); thresholds are edited as percentages
NUMERIC_FIELDS: dict[str, tuple[str, int, int, int]] = {
    "grid_size": ("Dot size", 5, 50, 1),
    "min_radius": ("Min radius", 1, 50, 1),
    "max_radius": ("Max radius", 1, 50, 1),
    "brightness": ("Brightness", -100, 100, 10),
    "contrast": ("Contrast", -100, 100, 10),
    "black_threshold": ("Black %", 0, 100, 5),
    "white_threshold": ("White %", 0, 100, 5),
}

PERCENT_FIELDS = ("black_threshold", "white_threshold")


def field_value(settings: Settings, name: str) -> int:
    """Current value of a numeric field as shown in the panel."""
    value = getattr(settings, name)
    if name in PERCENT_FIELDS:
        return round(value * 100)
    return int(value)


def apply_field(settings: Settings, name: str, shown: int) -> Settings:
    """Return settings with a panel value applied, clamped to its range.

    Keeps min_radius <= max_radius and black <= white by moving the
    partner value along.

    Raises:
        InvalidParameter: if the resulting settings are still invalid.
    """
    _, low, high, _ = NUMERIC_FIELDS[name]
    shown = max(low, min(high, shown))
    value = shown / 100 if name in PERCENT_FIELDS else shown
    updated = settings.replace(**{name: value})

    if name == "min_radius" and updated.max_radius < value:
        updated = updated.replace(max_radius=value)
    elif name == "max_radius" and updated.min_radius > value:
        updated = updated.replace(min_radius=value)
    elif name == "black_threshold" and updated.white_threshold < value:
        updated = updated.replace(white_threshold=value)
    elif name == "white_threshold" and updated.black_threshold > value:
        updated = updated.replace(black_threshold=value)

    updated.validate()
    return updated


class ControlPanel(Widget):
    """Settings panel with controls for the halftone parameters."""

    DEFAULT_CSS = """
    ControlPanel {
        width: 34;
        height: 1fr;
        background: $panel;
        padding: 1;
        border-left: solid $accent;
        overflow-y: auto;
    }

    ControlPanel Label {
        margin-top: 1;
        color: $text-muted;
    }

    ControlPanel Select {
        width: 100%;
        margin-bottom: 0;
    }

    ControlPanel #panel-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    ControlPanel .num-row {
        height: 3;
        margin-top: 1;
    }

    ControlPanel .num-row Label {
        width: 12;
        margin-top: 0;
        padding-top: 1;
    }

    ControlPanel .num-row Button {
        min-width: 3;
        margin: 0;
    }

    ControlPanel .num-row Input {
        width: 1fr;
        margin: 0;
    }

    ControlPanel #reseed {
        margin-top: 1;
        width: 100%;
    }
    """

    class SettingsChanged(Message):
        """Posted when any setting changes."""
        def __init__(self, settings: Settings) -> None:
            super().__init__()
            self.settings = settings

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._settings = settings or Settings()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Settings", id="panel-title")

            yield Label("Halftone mode")
            yield Select(
                [(m.value, m.value) for m in HalftoneMode],
                value=HalftoneMode(self._settings.mode).value,
                allow_blank=False,
                id="mode-select",
            )

            yield Label("Color mode")
            yield Select(
                [(c.value, c.value) for c in ColorMode],
                value=ColorMode(self._settings.color_mode).value,
                allow_blank=False,
                id="color-select",
            )

            for name, (label, _, _, _) in NUMERIC_FIELDS.items():
                with Horizontal(classes="num-row", id=f"row-{name}"):
                    yield Label(label)
                    yield Button("-", id=f"dec-{name}")
                    yield Input(
                        value=str(field_value(self._settings, name)),
                        id=f"input-{name}",
                        type="integer",
                    )
                    yield Button("+", id=f"inc-{name}")

            yield Button("Reseed packing", id="reseed")

    def on_mount(self) -> None:
        self._show_mode_rows()

    @property
    def settings(self) -> Settings:
        return self._settings

    def _show_mode_rows(self) -> None:
        """Show the dot-size row for grid mode, radius rows for packing."""
        uniform = self._settings.mode == HalftoneMode.UNIFORM
        try:
            self.query_one("#row-grid_size").display = uniform
            self.query_one("#row-min_radius").display = not uniform
            self.query_one("#row-max_radius").display = not uniform
            self.query_one("#reseed").display = not uniform
        except Exception:
            pass

    def _sync_inputs(self) -> None:
        for name in NUMERIC_FIELDS:
            try:
                self.query_one(f"#input-{name}", Input).value = str(
                    field_value(self._settings, name)
                )
            except Exception:
                pass

    def _update_settings(self, settings: Settings) -> None:
        """Store new settings and emit change."""
        self._settings = settings
        self._show_mode_rows()
        self._sync_inputs()
        self.post_message(self.SettingsChanged(self._settings))

    def _set_field(self, name: str, shown: int) -> None:
        try:
            updated = apply_field(self._settings, name, shown)
        except InvalidParameter:
            self._sync_inputs()
            return
        self._update_settings(updated)

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "mode-select":
            self._update_settings(self._settings.replace(mode=HalftoneMode(event.value)))
        elif event.select.id == "color-select":
            self._update_settings(
                self._settings.replace(color_mode=ColorMode(event.value))
            )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        btn = event.button.id or ""
        if btn == "reseed":
            self._update_settings(self._settings.replace(seed=random.randrange(2**32)))
            return
        action, _, name = btn.partition("-")
        if name not in NUMERIC_FIELDS:
            return
        step = NUMERIC_FIELDS[name][3]
        current = field_value(self._settings, name)
        if action == "dec":
            self._set_field(name, current - step)
        elif action == "inc":
            self._set_field(name, current + step)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        try:
            val = int(event.value)
        except ValueError:
            return
        name = (event.input.id or "").removeprefix("input-")
        if name in NUMERIC_FIELDS:
            self._set_field(name, val)
