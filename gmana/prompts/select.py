"""
Interactive list selection for gmana prompts.

Provides a minimal inline list where arrow keys move the cursor, Space
toggles an item in multi-select mode and Enter confirms.
"""

from typing import Iterable, List, NamedTuple, Optional
from prompt_toolkit import Application
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl


class Choice(NamedTuple):
    """A selectable option."""
    value: str
    label: str
    hint: str = ""


class SelectApp:
    """Inline single or multi choice selector."""

    def __init__(self, message: str, choices: List[Choice], multiple: bool = False,
                 initial: Iterable[str] = (), required: bool = True):
        """
        Initialize the selector.

        Args:
            message: Question shown above the list
            choices: Options to choose from
            multiple: Allow several options to be checked
            initial: Values checked at start (multi-select only)
            required: In multi-select, refuse to confirm with nothing checked
        """
        self.message = message
        self.choices = choices
        self.multiple = multiple
        self.required = required
        self.selected_index = 0
        self.checked = {value for value in initial if any(c.value == value for c in choices)}
        self.result: Optional[List[str]] = None
        self.error = ""

        # Create key bindings
        self.bindings = self._create_key_bindings()

        # Create layout
        self.layout = self._create_layout()

    def _create_key_bindings(self) -> KeyBindings:
        """Create key bindings for the interface."""
        bindings = KeyBindings()

        @bindings.add('c-c')
        @bindings.add('escape')
        def _(event):
            """Quit without selection."""
            self.result = None
            event.app.exit()

        @bindings.add('enter')
        def _(event):
            """Confirm and exit."""
            if self.confirm():
                event.app.exit()

        @bindings.add('down')
        @bindings.add('tab')
        def _(event):
            """Move to next choice."""
            self.move(1)

        @bindings.add('up')
        @bindings.add('s-tab')
        def _(event):
            """Move to previous choice."""
            self.move(-1)

        @bindings.add(' ')
        def _(event):
            """Toggle current choice."""
            self.toggle()

        return bindings

    def _create_layout(self) -> Layout:
        """Create the inline layout."""
        choices_window = Window(
            content=FormattedTextControl(text=self._get_choices_text, focusable=True,
                                         show_cursor=False),
            height=len(self.choices),
            wrap_lines=False,
        )

        status_window = Window(
            content=FormattedTextControl(text=self._get_status_text),
            height=1,
            style="class:status",
        )

        root_container = HSplit([
            Window(
                content=FormattedTextControl(text=f"? {self.message}"),
                height=1,
                style="class:title",
            ),
            choices_window,
            status_window,
        ])

        return Layout(root_container, focused_element=choices_window)

    def move(self, step: int) -> None:
        """Move the cursor, wrapping around the list."""
        if self.choices:
            self.selected_index = (self.selected_index + step) % len(self.choices)
            self.error = ""

    def toggle(self) -> None:
        """Check or uncheck the choice under the cursor (multi-select only)."""
        if not self.multiple or not self.choices:
            return

        value = self.choices[self.selected_index].value
        if value in self.checked:
            self.checked.discard(value)
        else:
            self.checked.add(value)
        self.error = ""

    def confirm(self) -> bool:
        """
        Store the result for the current state.

        Returns:
            True if the selection is acceptable and the app may exit
        """
        if not self.choices:
            self.result = []
            return True

        if not self.multiple:
            self.result = [self.choices[self.selected_index].value]
            return True

        if self.required and not self.checked:
            self.error = "Select at least one option"
            return False

        # Keep list order, not toggle order
        self.result = [c.value for c in self.choices if c.value in self.checked]
        return True

    def _get_choices_text(self) -> FormattedText:
        """Get formatted text for the choice list."""
        lines = []
        for i, choice in enumerate(self.choices):
            pointer = "❯ " if i == self.selected_index else "  "
            style = "class:selected" if i == self.selected_index else "class:choice"

            if self.multiple:
                mark = "◼ " if choice.value in self.checked else "◻ "
            else:
                mark = ""

            hint = f" ({choice.hint})" if choice.hint else ""
            lines.append((style, f"{pointer}{mark}{choice.label}"))
            lines.append(("class:hint", f"{hint}\n"))

        return FormattedText(lines)

    def _get_status_text(self) -> FormattedText:
        """Get formatted text for status line."""
        if self.error:
            return FormattedText([("class:error", self.error)])

        if self.multiple:
            instructions = "↑/↓: move • Space: toggle • Enter: confirm • Esc: cancel"
        else:
            instructions = "↑/↓: move • Enter: select • Esc: cancel"

        return FormattedText([("class:instructions", instructions)])

    def run(self) -> Optional[List[str]]:
        """
        Run the selector.

        Returns:
            Selected values, or None if cancelled
        """
        app = Application(
            layout=self.layout,
            key_bindings=self.bindings,
            full_screen=False,
            mouse_support=False,
        )
        app.run()
        return self.result


def select(message: str, choices: List[Choice]) -> Optional[str]:
    """
    Ask the user to pick one choice.

    Returns:
        Selected value, or None if cancelled
    """
    if not choices:
        return None

    result = SelectApp(message, choices).run()
    return result[0] if result else None


def multiselect(message: str, choices: List[Choice], initial: Iterable[str] = (),
                required: bool = True) -> Optional[List[str]]:
    """
    Ask the user to check any number of choices.

    Returns:
        Checked values in list order, or None if cancelled
    """
    return SelectApp(message, choices, multiple=True, initial=initial,
                     required=required).run()
