"""状態機械 (State Machines)

ラウンド解決の段階遷移を管理。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..models import RoundPhase


class TransitionError(Exception):
    """不正な状態遷移"""

    pass


class RoundEvent(StrEnum):
    """ラウンド段階を進めるイベント"""

    STARTED = "started"
    EVIDENCE_READ = "evidence_read"
    TOKEN_REDUCED = "token_reduced"
    CANDIDATES_RESOLVED = "candidates_resolved"
    SEARCH_COMPLETED = "search_completed"
    DECIDED = "decided"
    FAILED = "failed"


@dataclass
class Transition:
    """状態遷移の定義"""

    from_state: RoundPhase
    to_state: RoundPhase
    event: RoundEvent


class StateMachine:
    """汎用状態機械基底クラス"""

    def __init__(self, initial_state: RoundPhase, transitions: list[Transition]):
        self.current_state = initial_state
        self._transitions = {(t.from_state, t.event): t for t in transitions}

    def can_transition(self, event: RoundEvent) -> bool:
        """指定イベントで遷移可能か確認"""
        return (self.current_state, event) in self._transitions

    def get_valid_events(self) -> list[RoundEvent]:
        """現在の状態から遷移可能なイベント一覧を取得"""
        return [event for (state, event) in self._transitions if state == self.current_state]

    def transition(self, event: RoundEvent) -> RoundPhase:
        """イベントを適用して状態遷移

        Raises:
            TransitionError: 不正な遷移の場合
        """
        transition = self._transitions.get((self.current_state, event))

        if not transition:
            valid = self.get_valid_events()
            raise TransitionError(
                f"Invalid transition: {self.current_state} + {event}. Valid events: {valid}"
            )

        self.current_state = transition.to_state
        return self.current_state


# 失敗遷移が可能な作業中の段階
_WORKING_PHASES = (
    RoundPhase.EXTRACTING,
    RoundPhase.REDUCING,
    RoundPhase.RESOLVING,
    RoundPhase.QUERYING,
    RoundPhase.SCORING,
)


class RoundStateMachine(StateMachine):
    """ラウンド状態機械

    状態遷移:
    - IDLE -> EXTRACTING -> REDUCING -> RESOLVING -> QUERYING -> SCORING -> DECIDED
    - 作業中の各段階 -> FAILED

    DECIDED / FAILED は終端。リトライ遷移は持たない（新しいラウンドは新しい状態機械で開始する）。
    """

    def __init__(self):
        transitions = [
            Transition(RoundPhase.IDLE, RoundPhase.EXTRACTING, RoundEvent.STARTED),
            Transition(RoundPhase.EXTRACTING, RoundPhase.REDUCING, RoundEvent.EVIDENCE_READ),
            Transition(RoundPhase.REDUCING, RoundPhase.RESOLVING, RoundEvent.TOKEN_REDUCED),
            Transition(
                RoundPhase.RESOLVING, RoundPhase.QUERYING, RoundEvent.CANDIDATES_RESOLVED
            ),
            Transition(RoundPhase.QUERYING, RoundPhase.SCORING, RoundEvent.SEARCH_COMPLETED),
            Transition(RoundPhase.SCORING, RoundPhase.DECIDED, RoundEvent.DECIDED),
        ]
        transitions += [
            Transition(phase, RoundPhase.FAILED, RoundEvent.FAILED) for phase in _WORKING_PHASES
        ]
        super().__init__(RoundPhase.IDLE, transitions)

    @property
    def is_terminal(self) -> bool:
        return self.current_state in (RoundPhase.DECIDED, RoundPhase.FAILED)
