"""証拠抽出

描画済みのラウンド画面から統計・候補ID・ファイル名・コード・ポイントを読み取り、
型付きの RoundEvidence に変換する。
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from stripsolver.core.models import RoundEvidence

from .interfaces import UIReader

logger = logging.getLogger(__name__)

# 認識する統計ラベル（小文字）
STAT_LABELS = ("your total points", "your rank", "active users")

_STAT_PATTERN = re.compile(
    r"(" + "|".join(re.escape(label) for label in STAT_LABELS) + r"): #?([0-9]+)",
    re.IGNORECASE,
)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class RoundSelectors:
    """ラウンド画面のCSSセレクタ"""

    stats: str = "div.text-lg"
    candidates: str = "[phx-value-githubrepoid]"
    candidate_buttons: str = "button[phx-value-githubrepoid]"
    candidate_attribute: str = "phx-value-githubrepoid"
    file_name: str = ".code-half h1"
    file_name_ready: str = ".code-half > h1"
    code: str = "#main-code-block"
    points: str = ".code-half div.text-lg"
    points_ready: str = ".code-half > div.text-lg"
    verdict: str = ".answer-half div.text-3xl.rounded"
    next_question: str = "[phx-click='nextQuestion']"

    def candidate_button(self, repository_id: int) -> str:
        """指定リポジトリの候補ボタン"""
        return f'[{self.candidate_attribute}="{repository_id}"]'

    @property
    def required(self) -> list[str]:
        """読み取り前に存在が必要な要素"""
        return [
            self.stats,
            self.candidate_buttons,
            self.file_name_ready,
            self.code,
            self.points_ready,
        ]


def parse_stats(texts: Iterable[str | None]) -> dict[str, str]:
    """統計テキストをラベル→数値文字列に変換する

    一致しないテキストは無視する。ラベルは小文字に正規化する。
    """
    stats: dict[str, str] = {}
    for text in texts:
        if not text:
            continue
        match = _STAT_PATTERN.search(text.lower())
        if match:
            stats[match.group(1)] = match.group(2)
    return stats


def parse_points(text: str | None) -> int | None:
    """先頭の整数を読む（数値でなければ None）"""
    if not text:
        return None
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def parse_candidate_ids(values: Iterable[str | None]) -> list[int]:
    """候補ID属性を整数に変換する（DOM順・重複保持）"""
    ids: list[int] = []
    for value in values:
        try:
            ids.append(int((value or "").strip()))
        except ValueError:
            logger.warning("候補IDを解釈できません: %r", value)
    return ids


class EvidenceExtractor:
    """ラウンド画面から RoundEvidence を読み取る

    必要な要素が揃うまで待機し、各値を並行に読み取る。
    待機のタイムアウトは UIReader 側に委ね、ここではリトライしない。
    """

    def __init__(self, selectors: RoundSelectors | None = None) -> None:
        self.selectors = selectors or RoundSelectors()

    async def extract(self, reader: UIReader) -> RoundEvidence:
        """証拠を抽出する

        Args:
            reader: 描画済みのラウンド画面

        Returns:
            RoundEvidence
        """
        s = self.selectors
        await reader.wait_for_elements(s.required)

        stats_texts, candidate_values, file_name, code, points = await asyncio.gather(
            reader.read_all(s.stats),
            reader.read_attribute_all(s.candidates, s.candidate_attribute),
            reader.read_text(s.file_name),
            reader.read_text(s.code),
            reader.read_text(s.points),
        )

        return RoundEvidence(
            stats=parse_stats(stats_texts),
            candidate_ids=parse_candidate_ids(candidate_values),
            file_name_hint=file_name.strip() if file_name else None,
            code_block=code,
            displayed_points=parse_points(points),
        )
