"""
Tests for the per-turn flow state machine.

Ensures that:
1. Each branch (small talk, qualification, search) reaches DONE
2. Stages cannot be skipped or revisited
3. A trace records the path it took
"""

import pytest
from conversation_flow import TurnState, TurnTrace, InvalidTransition, can_transition, TRANSITIONS


def _walk(*states):
    trace = TurnTrace()
    for state in states:
        trace.advance(state)
    return trace


class TestBranches:
    def test_small_talk(self):
        trace = _walk(TurnState.CLASSIFIED, TurnState.CONVERSING, TurnState.DONE)
        assert trace.is_done
        assert trace.path == "start → classified → conversing → done"

    def test_qualification(self):
        trace = _walk(TurnState.CLASSIFIED, TurnState.QUALIFYING, TurnState.DONE)
        assert trace.is_done

    def test_search(self):
        trace = _walk(
            TurnState.CLASSIFIED, TurnState.SEARCHING, TurnState.RANKING,
            TurnState.COMPOSING, TurnState.DONE,
        )
        assert trace.visited[-1] == TurnState.DONE
        assert len(trace.visited) == 6


class TestInvalidTransitions:
    def test_cannot_skip_classification(self):
        with pytest.raises(InvalidTransition):
            TurnTrace().advance(TurnState.SEARCHING)

    def test_cannot_compose_without_ranking(self):
        trace = _walk(TurnState.CLASSIFIED, TurnState.SEARCHING)
        with pytest.raises(InvalidTransition):
            trace.advance(TurnState.COMPOSING)

    def test_done_is_terminal(self):
        trace = _walk(TurnState.CLASSIFIED, TurnState.CONVERSING, TurnState.DONE)
        for state in TurnState:
            assert not can_transition(trace.state, state)

    def test_failed_advance_keeps_state(self):
        trace = _walk(TurnState.CLASSIFIED)
        with pytest.raises(InvalidTransition):
            trace.advance(TurnState.DONE)
        assert trace.state == TurnState.CLASSIFIED

    def test_invalid_transition_is_value_error(self):
        assert issubclass(InvalidTransition, ValueError)


class TestTable:
    def test_every_state_has_an_entry(self):
        assert set(TRANSITIONS) == set(TurnState)

    def test_every_state_reaches_done(self):
        """No dead ends other than DONE itself."""
        for start in TurnState:
            seen, frontier = set(), [start]
            while frontier:
                state = frontier.pop()
                if state in seen:
                    continue
                seen.add(state)
                frontier.extend(TRANSITIONS[state])
            assert TurnState.DONE in seen
