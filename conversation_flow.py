"""
Per-turn Flow State Machine for OmnIA Chat.

One user turn walks:
  START → CLASSIFIED → CONVERSING | QUALIFYING | SEARCHING → RANKING → COMPOSING → DONE

No state survives the turn; continuity comes only from the history the caller
replays with each message.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List


class TurnState(Enum):
    """Stages of a single turn."""
    START = "start"
    CLASSIFIED = "classified"
    CONVERSING = "conversing"      # Small talk reply
    QUALIFYING = "qualifying"      # Clarifying question, no search
    SEARCHING = "searching"        # Catalog query
    RANKING = "ranking"            # Relevance scoring
    COMPOSING = "composing"        # Product reply
    DONE = "done"


TRANSITIONS = {
    TurnState.START:      {TurnState.CLASSIFIED},
    TurnState.CLASSIFIED: {TurnState.CONVERSING, TurnState.QUALIFYING, TurnState.SEARCHING},
    TurnState.CONVERSING: {TurnState.DONE},
    TurnState.QUALIFYING: {TurnState.DONE},
    TurnState.SEARCHING:  {TurnState.RANKING},
    TurnState.RANKING:    {TurnState.COMPOSING},
    TurnState.COMPOSING:  {TurnState.DONE},
    TurnState.DONE:       set(),
}


class InvalidTransition(ValueError):
    pass


def can_transition(current: TurnState, target: TurnState) -> bool:
    return target in TRANSITIONS[current]


@dataclass
class TurnTrace:
    """Records the stages one turn went through."""
    state: TurnState = TurnState.START
    visited: List[TurnState] = field(default_factory=lambda: [TurnState.START])

    def advance(self, target: TurnState) -> "TurnTrace":
        if not can_transition(self.state, target):
            raise InvalidTransition(f"{self.state.value} → {target.value} is not allowed")
        self.state = target
        self.visited.append(target)
        return self

    @property
    def is_done(self) -> bool:
        return self.state == TurnState.DONE

    @property
    def path(self) -> str:
        return " → ".join(s.value for s in self.visited)
