"""Tests for calendar keyboard shortcuts."""

import pytest

from crewboard.interaction.keyboard import KeyboardShortcuts, KeyEvent


@pytest.fixture
def calls():
    return []


@pytest.fixture
def shortcuts(calls):
    return KeyboardShortcuts(
        on_previous_week=lambda: calls.append("previous"),
        on_next_week=lambda: calls.append("next"),
        on_today=lambda: calls.append("today"),
        on_escape=lambda: calls.append("escape"),
        on_show_help=lambda: calls.append("help"),
    )


class TestKeyboardShortcuts:
    """Tests for KeyboardShortcuts.handle."""

    @pytest.mark.parametrize(
        "key,action",
        [
            ("ArrowLeft", "previous"),
            ("ArrowRight", "next"),
            ("t", "today"),
            ("T", "today"),
            ("Escape", "escape"),
            ("?", "help"),
        ],
    )
    def test_bound_keys(self, shortcuts, calls, key, action):
        assert shortcuts.handle(KeyEvent(key))
        assert calls == [action]

    def test_unbound_key(self, shortcuts, calls):
        assert not shortcuts.handle(KeyEvent("x"))
        assert calls == []

    @pytest.mark.parametrize("modifier", ["ctrl", "meta", "alt"])
    def test_modifier_chords_ignored(self, shortcuts, calls, modifier):
        assert not shortcuts.handle(KeyEvent("ArrowRight", **{modifier: True}))
        assert calls == []

    def test_typing_in_field_ignored(self, shortcuts, calls):
        assert not shortcuts.handle(KeyEvent("t", in_input_field=True))
        assert calls == []

    def test_escape_works_while_typing(self, shortcuts, calls):
        assert shortcuts.handle(KeyEvent("Escape", in_input_field=True))
        assert calls == ["escape"]

    def test_disabled(self, shortcuts, calls):
        shortcuts.enabled = False

        assert not shortcuts.handle(KeyEvent("Escape"))
        assert calls == []

    def test_help_binding_optional(self, calls):
        shortcuts = KeyboardShortcuts(
            on_previous_week=lambda: None,
            on_next_week=lambda: None,
            on_today=lambda: None,
            on_escape=lambda: None,
        )

        assert not shortcuts.handle(KeyEvent("?"))
        assert "?" not in shortcuts.bound_keys()
        assert shortcuts.bound_keys()[0] == "Escape"
