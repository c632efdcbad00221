"""
Command engine for undo/redo.

Every mutation an orchestrator issues is wrapped in a ``Command`` and pushed
onto a ``CommandHistory``. Two flavours exist:

- Snapshot commands capture the affected state when constructed, run their
  action on the first ``execute()`` and capture the resulting state. Redo
  restores that captured result instead of re-running the action; undo
  restores the state from before.
- Inverse-pair commands hold an action and its explicit inverse, for
  mutations that are cheaper to reverse than to snapshot.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from pixelforge.config import settings
from pixelforge.exceptions import EmptyStackError

logger = logging.getLogger(__name__)

Action = Callable[[], Any]


class Command(ABC):
    """Invertible unit of mutation."""

    # Short label for logs and summaries
    label: str = 'command'

    @abstractmethod
    def execute(self) -> None:
        """Apply the mutation (first run or redo)."""
        pass

    @abstractmethod
    def undo(self) -> None:
        """Revert the mutation."""
        pass


class SnapshotCommand(Command):
    """
    Command that restores captured state instead of computing inverses.

    Subclasses define what to capture and how to put it back. The "before"
    state is captured at construction, so the command must be built
    immediately before it is pushed.
    """

    def __init__(self, action: Action):
        self._action = action
        self._before = self._capture()
        self._after: Optional[Any] = None
        self._executed = False

    @abstractmethod
    def _capture(self) -> Any:
        """Serialized copy of the affected state."""
        pass

    @abstractmethod
    def _restore(self, state: Any) -> None:
        """Put a captured state back."""
        pass

    def execute(self) -> None:
        if not self._executed:
            self._action()
            self._after = self._capture()
            self._executed = True
        else:
            self._restore(self._after)

    def undo(self) -> None:
        self._restore(self._before)


class InversePairCommand(Command):
    """Command built from an action and the action that reverses it."""

    label = 'inverse pair'

    def __init__(self, action: Action, inverse: Action):
        self._action = action
        self._inverse = inverse

    def execute(self) -> None:
        self._action()

    def undo(self) -> None:
        self._inverse()


class CommandHistory:
    """
    Linear undo/redo stacks.

    ``push`` executes a command and records it. A push after an undo discards
    the redo stack. Once the undo stack grows past ``max_depth`` the oldest
    entries are evicted.
    """

    def __init__(self, max_depth: Optional[int] = None):
        self._max_depth = max_depth if max_depth is not None else settings.HISTORY_DEPTH
        if self._max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self._max_depth}")
        self._undo_stack: list[Command] = []
        self._redo_stack: list[Command] = []

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_depth(self) -> int:
        return len(self._redo_stack)

    def push(self, command: Command) -> None:
        """Execute a command and record it. Nothing is recorded if it raises."""
        command.execute()
        self._undo_stack.append(command)
        self._redo_stack.clear()
        if len(self._undo_stack) > self._max_depth:
            evicted = self._undo_stack.pop(0)
            logger.debug("History full; evicted oldest %s", evicted.label)
        logger.debug("Pushed %s (undo depth %d)", command.label, len(self._undo_stack))

    def undo(self) -> Command:
        """Revert the most recent command and move it to the redo stack."""
        if not self._undo_stack:
            raise EmptyStackError('undo')
        command = self._undo_stack[-1]
        command.undo()
        self._undo_stack.pop()
        self._redo_stack.append(command)
        logger.debug("Undid %s", command.label)
        return command

    def redo(self) -> Command:
        """Re-apply the most recently undone command."""
        if not self._redo_stack:
            raise EmptyStackError('redo')
        command = self._redo_stack[-1]
        command.execute()
        self._redo_stack.pop()
        self._undo_stack.append(command)
        logger.debug("Redid %s", command.label)
        return command

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
