"""ラウンド解決のデータモデル

リポジトリ、ラウンド証拠、検索ヒット、判定結果の定義。
すべて不変（frozen）モデル。
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RoundPhase(StrEnum):
    """ラウンドの処理段階"""

    IDLE = "idle"
    EXTRACTING = "extracting"
    REDUCING = "reducing"
    RESOLVING = "resolving"
    QUERYING = "querying"
    SCORING = "scoring"
    DECIDED = "decided"
    FAILED = "failed"


class FailureKind(StrEnum):
    """ラウンド失敗の分類"""

    EMPTY_EVIDENCE = "empty_evidence"
    LOOKUP_FAILURE = "lookup_failure"
    ORACLE_UNAVAILABLE = "oracle_unavailable"
    NO_CANDIDATES = "no_candidates"


class Repository(BaseModel):
    """候補リポジトリ

    同一性は id で判定する。full_name はクエリ構築にのみ使う。
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="GitHubリポジトリID")
    owner: str = Field(..., description="オーナー名")
    name: str = Field(..., description="リポジトリ名")
    full_name: str = Field(..., description="owner/name 形式の完全名")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        """GitHub API の /repositories/{id} レスポンスから生成"""
        owner = data["owner"]["login"]
        name = data["name"]
        return cls(
            id=data["id"],
            owner=owner,
            name=name,
            full_name=data.get("full_name") or f"{owner}/{name}",
        )


class RoundEvidence(BaseModel):
    """1ラウンド分の画面から読み取った証拠

    candidate_ids は DOM 順で、重複を含むことがある。
    """

    model_config = ConfigDict(frozen=True)

    stats: dict[str, str] = Field(default_factory=dict, description="統計ラベル→数値文字列")
    candidate_ids: list[int] = Field(default_factory=list, description="候補リポジトリID")
    file_name_hint: str | None = Field(default=None, description="表示ファイル名（伏字を含みうる）")
    code_block: str | None = Field(default=None, description="表示コード")
    displayed_points: int | None = Field(default=None, description="このラウンドの獲得ポイント")


class SearchHit(BaseModel):
    """コード検索のヒット"""

    model_config = ConfigDict(frozen=True)

    repository_id: int = Field(..., description="ヒットしたリポジトリID")
    relevance: float = Field(..., ge=0.0, description="関連度スコア")
    path: str | None = Field(default=None, description="ヒットしたファイルパス")


class Decision(BaseModel):
    """ラウンドの判定"""

    model_config = ConfigDict(frozen=True)

    chosen_repository_id: int = Field(..., description="選択したリポジトリID")
    score: float = Field(default=0.0, ge=0.0, description="選択したリポジトリの累積スコア")


class RoundReport(BaseModel):
    """ログ用のラウンドメタデータ"""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="コードから抽出したトークン")
    query: str = Field(..., description="発行した検索クエリ")
    candidates: list[Repository] = Field(default_factory=list, description="解決済み候補")
    scores: dict[int, float] = Field(default_factory=dict, description="候補別の累積スコア")
    hit_count: int = Field(default=0, ge=0, description="検索ヒット数")


class RoundFailure(BaseModel):
    """ラウンド失敗の診断情報"""

    model_config = ConfigDict(frozen=True)

    stage: RoundPhase = Field(..., description="失敗した段階")
    kind: FailureKind = Field(..., description="失敗の分類")
    message: str = Field(..., description="失敗理由")


class RoundOutcome(BaseModel):
    """ラウンドの結果（Decided または Failed）"""

    model_config = ConfigDict(frozen=True)

    status: RoundPhase = Field(..., description="終端状態（DECIDED / FAILED）")
    decision: Decision | None = Field(default=None)
    report: RoundReport | None = Field(default=None)
    failure: RoundFailure | None = Field(default=None)

    @classmethod
    def decided(cls, decision: Decision, report: RoundReport) -> RoundOutcome:
        return cls(status=RoundPhase.DECIDED, decision=decision, report=report)

    @classmethod
    def failed(cls, failure: RoundFailure) -> RoundOutcome:
        return cls(status=RoundPhase.FAILED, failure=failure)

    @property
    def is_decided(self) -> bool:
        return self.status == RoundPhase.DECIDED
