"""
Primary/secondary color selection.

Transitions are pure functions from (state, clicked color) to a new state.
"""

from dataclasses import dataclass, replace
from typing import Optional

from errors import RejectionError

TOO_MANY_COLORS = "You can only select a primary and a secondary color."


@dataclass(frozen=True)
class SelectionState:
    primary: Optional[str] = None
    secondary: Optional[str] = None


def click(state: SelectionState, color: str) -> SelectionState:
    """
    Apply a swatch click.

    Clicking a selected color clears its role; otherwise the color fills the
    first empty role.

    Raises:
        RejectionError: If both roles are already taken by other colors
    """
    if color == state.primary:
        return replace(state, primary=None)
    elif color == state.secondary:
        return replace(state, secondary=None)
    elif state.primary is None:
        return replace(state, primary=color)
    elif state.secondary is None:
        return replace(state, secondary=color)
    raise RejectionError(TOO_MANY_COLORS)


def role_of(state: SelectionState, color: str) -> Optional[str]:
    """Return 'primary', 'secondary' or None for a color."""
    if color == state.primary:
        return 'primary'
    if color == state.secondary:
        return 'secondary'
    return None


def is_complete(state: SelectionState) -> bool:
    """Both roles are set, so a style guide can be generated."""
    return state.primary is not None and state.secondary is not None
