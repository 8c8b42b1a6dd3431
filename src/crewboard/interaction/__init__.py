"""User interaction state: drag/drop reassignment and keyboard shortcuts."""

from crewboard.interaction.drag_drop import (
    DragDropCoordinator,
    DragPayload,
    DragPhase,
    DragSession,
    DragState,
    DropTarget,
)
from crewboard.interaction.keyboard import KeyboardShortcuts, KeyEvent

__all__ = [
    # Drag and drop
    "DragDropCoordinator",
    "DragPayload",
    "DragPhase",
    "DragSession",
    "DragState",
    "DropTarget",
    # Keyboard
    "KeyboardShortcuts",
    "KeyEvent",
]
