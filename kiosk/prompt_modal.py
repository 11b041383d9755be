"""Single-line text entry modal screen."""

from __future__ import annotations

from typing import Callable

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from kiosk.utils import to_decimal


class PromptModal(ModalScreen[str | None]):
    """Prompt for one value. ``validate`` returns an error message or None."""

    CSS = """
    PromptModal {
        align: center middle;
        background: $background 60%;
    }

    #prompt-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #prompt-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #prompt-label {
        color: white;
        margin-bottom: 1;
    }

    #prompt-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #prompt-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #prompt-help {
        color: #dddddd;
    }
    """

    def __init__(
        self,
        title: str,
        label: str,
        initial: str = "",
        digits_only: bool = False,
        max_length: int = 60,
        secret: bool = False,
        validate: Callable[[str], str | None] | None = None,
    ) -> None:
        super().__init__()
        self.title_text = title
        self.label_text = label
        self.value = initial
        self.digits_only = digits_only
        self.max_length = max_length
        self.secret = secret
        self.validator = validate
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="prompt-dialog"):
            yield Static(self.title_text, id="prompt-title")
            yield Static(self.label_text, id="prompt-label")
            yield Static(id="prompt-value")
            yield Static(id="prompt-error")
            yield Static("Enter confirm. Backspace delete. Esc cancel.", id="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if self.digits_only and not event.character.isdigit():
                event.stop()
                return
            if len(self.value) < self.max_length:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        value = self.value.strip()
        if self.validator is not None:
            error = self.validator(value)
            if error:
                self.error = error
                self._refresh_content()
                return
        self.dismiss(value)

    def _refresh_content(self) -> None:
        value_widget = self.query_one("#prompt-value", Static)
        error_widget = self.query_one("#prompt-error", Static)
        shown = "•" * len(self.value) if self.secret else self.value
        value_widget.update(f"{shown}|")
        error_widget.update(self.error or "")


def required(message: str) -> Callable[[str], str | None]:
    def check(value: str) -> str | None:
        return None if value else message

    return check


def number(message: str, allow_zero: bool = True) -> Callable[[str], str | None]:
    def check(value: str) -> str | None:
        try:
            parsed = to_decimal(value)
        except ValueError:
            return message
        if parsed < 0 or (parsed == 0 and not allow_zero):
            return message
        return None

    return check
