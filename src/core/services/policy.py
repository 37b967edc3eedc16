"""
Conflict policy — what to do with a key that may already exist locally.

Decision table (first match wins):

    not installed              → download
    installed, --keep          → install (enable the existing copy)
    installed, --force         → download again
    installed, neither flag    → ask; unknown or empty answer → abort

``keep`` is checked before ``force``, so passing both keeps.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass

from src.core.models.action import Action

logger = logging.getLogger(__name__)

# (message, {code: label}, default code) → chosen code
PromptFn = Callable[[str, dict[str, str], str], str | None]

CHOICE_KEEP = "k"
CHOICE_DOWNLOAD = "d"
CHOICE_ABORT = "a"

CONFLICT_CHOICES: dict[str, str] = {
    CHOICE_KEEP: 'Keep existing extension. (Default) (Equivalent to option "-k")',
    CHOICE_DOWNLOAD: 'Download anyway. (Equivalent to option "-f")',
    CHOICE_ABORT: "Abort",
}
DEFAULT_CHOICE = CHOICE_KEEP

_CHOICE_ACTIONS: dict[str, Action] = {
    CHOICE_KEEP: Action.INSTALL,
    CHOICE_DOWNLOAD: Action.DOWNLOAD,
    CHOICE_ABORT: Action.ABORT,
}


@dataclass(frozen=True)
class ConflictPolicy:
    """Flags that settle a conflict without asking."""

    keep: bool = False
    force: bool = False


def conflict_message(key: str) -> str:
    """Question shown when ``key`` already exists."""
    return f'The extension "{key}" already exists. What would you like to do?'


def choice_to_action(choice: str | None) -> Action:
    """Map a prompt answer to an action. Anything unrecognized aborts."""
    if not choice:
        return Action.ABORT
    return _CHOICE_ACTIONS.get(choice.strip().lower(), Action.ABORT)


def decide(
    key: str,
    installed: Collection[str],
    policy: ConflictPolicy,
    interactive: PromptFn,
) -> Action:
    """Pick the action for one resolved key.

    ``interactive`` is only called when the key is installed and
    neither flag is set.
    """
    if key not in installed:
        return Action.DOWNLOAD
    if policy.keep:
        return Action.INSTALL
    if policy.force:
        return Action.DOWNLOAD

    answer = interactive(conflict_message(key), dict(CONFLICT_CHOICES), DEFAULT_CHOICE)
    action = choice_to_action(answer)
    logger.debug("Conflict on %s: answer=%r → %s", key, answer, action)
    return action
