"""状態機械のテスト"""

import pytest

from stripsolver.core.models import RoundPhase
from stripsolver.core.state import RoundEvent, RoundStateMachine, TransitionError


def _advance(sm: RoundStateMachine, *events: RoundEvent) -> RoundPhase:
    state = sm.current_state
    for event in events:
        state = sm.transition(event)
    return state


class TestRoundStateMachine:
    """RoundStateMachineのテスト"""

    def test_initial_state(self):
        """初期状態はIDLE"""
        sm = RoundStateMachine()
        assert sm.current_state == RoundPhase.IDLE
        assert not sm.is_terminal

    def test_full_path_to_decided(self):
        """全段階を経てDECIDEDに至る"""
        sm = RoundStateMachine()

        state = _advance(
            sm,
            RoundEvent.STARTED,
            RoundEvent.EVIDENCE_READ,
            RoundEvent.TOKEN_REDUCED,
            RoundEvent.CANDIDATES_RESOLVED,
            RoundEvent.SEARCH_COMPLETED,
            RoundEvent.DECIDED,
        )

        assert state == RoundPhase.DECIDED
        assert sm.is_terminal

    @pytest.mark.parametrize(
        "phase",
        [
            RoundPhase.EXTRACTING,
            RoundPhase.REDUCING,
            RoundPhase.RESOLVING,
            RoundPhase.QUERYING,
            RoundPhase.SCORING,
        ],
    )
    def test_any_working_phase_can_fail(self, phase):
        """作業中の段階からはFAILEDへ遷移できる"""
        sm = RoundStateMachine()
        sm.current_state = phase

        assert sm.transition(RoundEvent.FAILED) == RoundPhase.FAILED

    def test_idle_cannot_fail(self):
        """開始前は失敗遷移できない"""
        sm = RoundStateMachine()

        with pytest.raises(TransitionError):
            sm.transition(RoundEvent.FAILED)

    def test_terminal_states_have_no_retry(self):
        """終端状態からは遷移できない"""
        sm = RoundStateMachine()
        sm.current_state = RoundPhase.FAILED

        assert sm.get_valid_events() == []
        with pytest.raises(TransitionError):
            sm.transition(RoundEvent.STARTED)

    def test_skipping_a_phase_is_invalid(self):
        """段階の飛び越しは不正"""
        sm = RoundStateMachine()
        sm.transition(RoundEvent.STARTED)

        assert not sm.can_transition(RoundEvent.SEARCH_COMPLETED)
        with pytest.raises(TransitionError, match="Valid events"):
            sm.transition(RoundEvent.SEARCH_COMPLETED)
