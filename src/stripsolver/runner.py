"""ラウンドループ

証拠抽出 → 判定 → 候補クリック → 結果表示 → 次の問題 を繰り返す。

失敗時の方針:
    - Failed のラウンドはログに残して次のラウンドを開始する（推測はしない）
    - 同じ失敗が連続する間は待機秒を倍々に延ばす
    - ブラウザ操作の例外もログに残して次のラウンドを開始する
    - プロセスは1ラウンドの失敗では終了しない
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from playwright.async_api import Error as PlaywrightError

from stripsolver.browser.session import BrowserSessionError
from stripsolver.core.config import RunnerConfig
from stripsolver.core.models import RoundEvidence, RoundFailure, RoundOutcome
from stripsolver.engine.extractor import EvidenceExtractor
from stripsolver.engine.interfaces import UIReader
from stripsolver.engine.round import RoundResolver

logger = logging.getLogger(__name__)


class SessionLike(Protocol):
    """期限切れ時に再ログインできるセッション"""

    def needs_login(self) -> bool: ...

    async def login(self) -> None: ...


@dataclass
class RoundResult:
    """1ラウンドの実行結果"""

    number: int
    outcome: RoundOutcome
    evidence: RoundEvidence | None = None
    verdict: str | None = None


@dataclass
class RunSummary:
    """ループ全体の集計"""

    rounds: int = 0
    decided: int = 0
    failed: int = 0
    errors: int = 0
    last_stats: dict[str, str] = field(default_factory=dict)


class RoundRunner:
    """ラウンドループ

    Args:
        driver: ラウンド画面の読み取り・操作
        resolver: ラウンド解決エンジン
        config: ループ設定
        extractor: 証拠抽出器
        session: 再ログイン用のセッション（省略可）
        sleep: 待機関数（テスト用に差し替え可能）
    """

    def __init__(
        self,
        driver: UIReader,
        resolver: RoundResolver,
        config: RunnerConfig | None = None,
        extractor: EvidenceExtractor | None = None,
        session: SessionLike | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.driver = driver
        self.resolver = resolver
        self.config = config or RunnerConfig()
        self.extractor = extractor or EvidenceExtractor()
        self.session = session
        self._sleep = sleep
        self._round_number = 0

    async def play_round(self) -> RoundResult:
        """1ラウンドを実行する

        画面操作の例外はそのまま送出する。
        """
        self._round_number += 1
        if self.session is not None and self.session.needs_login():
            logger.info("セッションが期限切れのため再ログインします")
            await self.session.login()

        evidence, outcome = await self.resolver.extract_and_resolve(self.driver, self.extractor)
        result = RoundResult(number=self._round_number, outcome=outcome, evidence=evidence)
        if not outcome.is_decided or outcome.decision is None:
            return result

        selectors = self.extractor.selectors
        await asyncio.gather(
            self.driver.click(selectors.candidate_button(outcome.decision.chosen_repository_id)),
            self.driver.wait_for_elements([selectors.verdict, selectors.next_question]),
        )
        verdict = await self.driver.read_text(selectors.verdict)
        result.verdict = verdict.strip() if verdict else None
        logger.info("結果: %s", result.verdict)

        logger.info("回答済み。検索APIのレート制限のため待機します")
        await self._sleep(self.config.idle_seconds)
        await self.driver.click(selectors.next_question)
        await self._sleep(self.config.idle_seconds)
        return result

    async def run(self, max_rounds: int | None = None) -> RunSummary:
        """ラウンドを繰り返す

        Args:
            max_rounds: 最大ラウンド数（None の場合は設定値、0 は無制限）

        Returns:
            RunSummary
        """
        limit = self.config.max_rounds if max_rounds is None else max_rounds
        summary = RunSummary()
        last_failure: RoundFailure | None = None
        repeats = 0

        while not limit or summary.rounds < limit:
            summary.rounds += 1
            try:
                result = await self.play_round()
            except (PlaywrightError, BrowserSessionError):
                summary.errors += 1
                logger.exception("ラウンド %d でブラウザ操作に失敗しました", summary.rounds)
                await self._sleep(self.config.failure_backoff_seconds)
                continue

            if result.evidence is not None:
                summary.last_stats = dict(result.evidence.stats)

            if result.outcome.is_decided:
                summary.decided += 1
                last_failure, repeats = None, 0
                continue

            summary.failed += 1
            failure = result.outcome.failure
            repeats = repeats + 1 if failure is not None and failure == last_failure else 1
            last_failure = failure
            if failure is not None:
                logger.warning(
                    "ラウンド %d 失敗 (%d 回連続): stage=%s kind=%s %s",
                    result.number,
                    repeats,
                    failure.stage,
                    failure.kind,
                    failure.message,
                )
            await self._sleep(self._failure_backoff(repeats))

        return summary

    def _failure_backoff(self, repeats: int) -> float:
        """同じ失敗が続くたびに待機秒を倍にする（上限あり）"""
        backoff = self.config.failure_backoff_seconds * 2 ** (repeats - 1)
        return min(backoff, self.config.max_failure_backoff_seconds)
