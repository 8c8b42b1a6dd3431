"""Keyboard shortcuts for the crew calendar.

Shortcuts:
- ArrowLeft / ArrowRight: previous / next week
- t / T: jump to the current week
- Escape: cancel an active drag (works even while typing in a field)
"""

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class KeyEvent:
    """A key press, reduced to what the shortcut handler looks at."""

    key: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    in_input_field: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.ctrl or self.meta or self.alt


class KeyboardShortcuts:
    """Maps key presses to calendar actions.

    Example:
        >>> shortcuts = KeyboardShortcuts(
        ...     on_previous_week=board.previous_week,
        ...     on_next_week=board.next_week,
        ...     on_today=board.go_to_today,
        ...     on_escape=board.drag.cancel,
        ... )
        >>> shortcuts.handle(KeyEvent("ArrowRight"))
        True
    """

    def __init__(
        self,
        on_previous_week: Callable[[], object],
        on_next_week: Callable[[], object],
        on_today: Callable[[], object],
        on_escape: Callable[[], object],
        on_show_help: Optional[Callable[[], object]] = None,
        enabled: bool = True,
    ):
        self.enabled = enabled
        self._on_escape = on_escape
        self._bindings: dict[str, Callable[[], object]] = {
            "ArrowLeft": on_previous_week,
            "ArrowRight": on_next_week,
            "t": on_today,
            "T": on_today,
        }
        if on_show_help is not None:
            self._bindings["?"] = on_show_help

    def handle(self, event: KeyEvent) -> bool:
        """Run the action bound to a key.

        Returns:
            True if the key was handled.
        """
        if not self.enabled:
            return False

        if event.key == "Escape":
            self._on_escape()
            return True

        # Leave typing and browser/OS chords alone
        if event.in_input_field or event.has_modifier:
            return False

        action = self._bindings.get(event.key)
        if action is None:
            return False
        action()
        return True

    def bound_keys(self) -> list[str]:
        return ["Escape", *self._bindings]
