"""ラウンド解決（オーケストレーター）

縮約 → 候補解決 → クエリ構築 → 検索（1回） → 集計 → 最大スコア選択 の順に実行し、
Decided / Failed のいずれかを RoundOutcome として返す。
エンジン内ではリトライしない。ラウンド単位の再試行は呼び出し側の責務。
"""

from __future__ import annotations

import logging

from stripsolver.core.errors import OracleUnavailable, RoundError
from stripsolver.core.models import (
    Repository,
    RoundEvidence,
    RoundFailure,
    RoundOutcome,
    RoundReport,
    SearchHit,
)
from stripsolver.core.state import RoundEvent, RoundStateMachine

from .extractor import EvidenceExtractor
from .interfaces import CodeSearch, RepositoryLookup, UIReader
from .query import build_query
from .reducer import DEFAULT_REDACTION_MARKER, reduce_snippet
from .resolver import CandidateResolver
from .scoring import aggregate, select_best

logger = logging.getLogger(__name__)


class RoundResolver:
    """ラウンド解決エンジン

    使用例:
        resolver = RoundResolver(lookup=github, oracle=github)
        outcome = await resolver.resolve_round(evidence)
        if outcome.is_decided:
            await page.click(selectors.candidate_button(outcome.decision.chosen_repository_id))
    """

    def __init__(
        self,
        lookup: RepositoryLookup,
        oracle: CodeSearch,
        redaction_marker: str = DEFAULT_REDACTION_MARKER,
    ) -> None:
        """初期化

        Args:
            lookup: リポジトリ解決の協調者
            oracle: コード検索の協調者
            redaction_marker: 伏字マーカー
        """
        self.resolver = CandidateResolver(lookup)
        self.oracle = oracle
        self.redaction_marker = redaction_marker

    async def resolve_round(self, evidence: RoundEvidence) -> RoundOutcome:
        """抽出済みの証拠からラウンドを解決する"""
        machine = RoundStateMachine()
        machine.transition(RoundEvent.STARTED)
        return await self._resolve(evidence, machine)

    async def extract_and_resolve(
        self, reader: UIReader, extractor: EvidenceExtractor
    ) -> tuple[RoundEvidence, RoundOutcome]:
        """画面から証拠を抽出してラウンドを解決する

        画面読み取りの例外はそのまま送出する。
        """
        machine = RoundStateMachine()
        machine.transition(RoundEvent.STARTED)
        evidence = await extractor.extract(reader)
        logger.info(
            "証拠: file=%r candidates=%s points=%s stats=%s",
            evidence.file_name_hint,
            evidence.candidate_ids,
            evidence.displayed_points,
            evidence.stats,
        )
        return evidence, await self._resolve(evidence, machine)

    async def _resolve(self, evidence: RoundEvidence, machine: RoundStateMachine) -> RoundOutcome:
        machine.transition(RoundEvent.EVIDENCE_READ)
        try:
            token = reduce_snippet(evidence.code_block, self.redaction_marker)
            machine.transition(RoundEvent.TOKEN_REDUCED)

            repos = await self.resolver.resolve(evidence.candidate_ids)
            machine.transition(RoundEvent.CANDIDATES_RESOLVED)

            query = build_query(repos, evidence.file_name_hint, token, self.redaction_marker)
            hits = await self._search(query)
            machine.transition(RoundEvent.SEARCH_COMPLETED)

            scores = aggregate(repos, hits)
            decision = select_best(scores)
        except RoundError as exc:
            failure = RoundFailure(stage=machine.current_state, kind=exc.kind, message=exc.message)
            machine.transition(RoundEvent.FAILED)
            logger.debug("ラウンド失敗: stage=%s kind=%s", failure.stage, failure.kind)
            return RoundOutcome.failed(failure)

        machine.transition(RoundEvent.DECIDED)
        report = self._build_report(token, query, repos, scores, hits)
        logger.info(
            "判定: repo=%d score=%.3f query=%s",
            decision.chosen_repository_id,
            decision.score,
            query,
        )
        return RoundOutcome.decided(decision, report)

    async def _search(self, query: str) -> list[SearchHit]:
        """オラクルに1回だけ問い合わせる（失敗は OracleUnavailable）"""
        try:
            return await self.oracle.search_code(query)
        except Exception as exc:
            raise OracleUnavailable(f"Code search failed: {exc}") from exc

    @staticmethod
    def _build_report(
        token: str,
        query: str,
        repos: list[Repository],
        scores: dict[int, float],
        hits: list[SearchHit],
    ) -> RoundReport:
        return RoundReport(
            token=token,
            query=query,
            candidates=repos,
            scores=scores,
            hit_count=len(hits),
        )
