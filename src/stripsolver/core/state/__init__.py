"""ラウンド状態機械"""

from .machines import RoundEvent, RoundStateMachine, StateMachine, Transition, TransitionError

__all__ = [
    "RoundEvent",
    "RoundStateMachine",
    "StateMachine",
    "Transition",
    "TransitionError",
]
