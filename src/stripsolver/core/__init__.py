"""StripSolver Core モジュール

- Config: 設定管理
- Models: ラウンド解決のデータモデル
- Errors: ラウンド失敗の分類
- State: ラウンド状態機械
"""

from .config import StripSolverSettings, get_settings, reload_settings
from .errors import EmptyEvidence, LookupFailure, NoCandidates, OracleUnavailable, RoundError
from .models import (
    Decision,
    FailureKind,
    Repository,
    RoundEvidence,
    RoundFailure,
    RoundOutcome,
    RoundPhase,
    RoundReport,
    SearchHit,
)
from .state import RoundEvent, RoundStateMachine, TransitionError

__all__ = [
    # Config
    "get_settings",
    "reload_settings",
    "StripSolverSettings",
    # Errors
    "RoundError",
    "EmptyEvidence",
    "LookupFailure",
    "OracleUnavailable",
    "NoCandidates",
    # Models
    "Decision",
    "FailureKind",
    "Repository",
    "RoundEvidence",
    "RoundFailure",
    "RoundOutcome",
    "RoundPhase",
    "RoundReport",
    "SearchHit",
    # State
    "RoundEvent",
    "RoundStateMachine",
    "TransitionError",
]
