"""ラウンド解決エラー

いずれもラウンド内では回復不能。ラウンドは Failed として呼び出し元へ返される。
"""

from __future__ import annotations

from .models import FailureKind


class RoundError(Exception):
    """ラウンド解決エラーの基底クラス"""

    kind: FailureKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptyEvidence(RoundError):
    """コードから有効なトークンを抽出できない"""

    kind = FailureKind.EMPTY_EVIDENCE


class LookupFailure(RoundError):
    """候補リポジトリを解決できない"""

    kind = FailureKind.LOOKUP_FAILURE

    def __init__(self, message: str, repository_id: int | None = None) -> None:
        super().__init__(message)
        self.repository_id = repository_id


class OracleUnavailable(RoundError):
    """コード検索に失敗した"""

    kind = FailureKind.ORACLE_UNAVAILABLE


class NoCandidates(RoundError):
    """候補リポジトリが1件もない"""

    kind = FailureKind.NO_CANDIDATES
