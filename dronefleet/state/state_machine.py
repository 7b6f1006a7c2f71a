"""Finite state machine with validated transitions.

Used for the order lifecycle (CREATED -> ASSIGNED -> COMPLETED). A transition
table maps each state to the actions that may leave it; an action names its
target state and can carry an effect that runs on the transition.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

State = TypeVar("State", bound=Enum)
"""Type variable for state enumerations."""

ActionFn = Callable[..., Any]
"""Effect run when an action fires."""

StateGraph = Mapping[Enum, frozenset["Action"]]
"""Transition table: state -> actions allowed from it."""


@dataclass(frozen=True)
class Action:
    """A transition into ``state`` with an optional effect.

    Attributes:
        state: Target state.
        effect: Called with the arguments given to ``request_transition``.
    """

    state: Enum
    effect: ActionFn | None = None

    def __call__(self, *args, **kwargs) -> Any:
        if self.effect is not None:
            return self.effect(*args, **kwargs)
        return None


class StateMachine:
    """Tracks a current state and rejects transitions the graph does not allow.

    Example:
        >>> class Light(Enum):
        ...     RED = 1
        ...     GREEN = 2
        >>> graph = {Light.RED: frozenset({Action(Light.GREEN)})}
        >>> sm = StateMachine(Light.RED, graph)
        >>> sm.request_transition(Light.GREEN)
        >>> sm.current
        <Light.GREEN: 2>
    """

    __slots__ = ("_state", "_allowed")

    def __init__(self, initial_state: Enum, nodes_graph: StateGraph):
        self._state = initial_state
        self._allowed = nodes_graph

    @property
    def current(self) -> Enum:
        return self._state

    def can_transition(self, next_state: Enum) -> bool:
        return self._find_action(self._state, next_state) is not None

    def request_transition(self, next_state: Enum, *args, **kwargs) -> Any:
        """Move to ``next_state`` and run the action's effect.

        Raises:
            ValueError: If the graph has no action from the current state
                into ``next_state``.
        """
        action = self._find_action(self._state, next_state)
        if action is None:
            msg = f"Illegal transition {self._state.name} -> {next_state.name}"
            raise ValueError(msg)
        self._state = action.state
        return action(*args, **kwargs)

    def _find_action(self, frm: Enum, to: Enum) -> Action | None:
        for action in self._allowed.get(frm, frozenset()):
            if action.state == to:
                return action
        return None
