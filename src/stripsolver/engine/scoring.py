"""スコア集計

検索ヒットの関連度を候補ごとに合算する（最大値ではなく合計）。
ヒットのない候補も 0 で保持し、「検討していない」と区別する。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from stripsolver.core.errors import NoCandidates
from stripsolver.core.models import Decision, Repository, SearchHit

logger = logging.getLogger(__name__)


def aggregate(candidates: Sequence[Repository], hits: Iterable[SearchHit]) -> dict[int, float]:
    """候補別の累積スコアを計算する

    Args:
        candidates: 解決済み候補（解決順）
        hits: 検索ヒット

    Returns:
        候補ID→累積関連度。キー集合は候補ID集合と常に一致する
    """
    scores: dict[int, float] = {repo.id: 0.0 for repo in candidates}
    for hit in hits:
        if hit.repository_id not in scores:
            logger.debug("候補外のヒットを無視: repo=%d path=%s", hit.repository_id, hit.path)
            continue
        scores[hit.repository_id] += hit.relevance
    return scores


def select_best(scores: dict[int, float]) -> Decision:
    """最大スコアの候補を選ぶ

    同点の場合は反復順で最初の候補。

    Raises:
        NoCandidates: スコア表が空の場合
    """
    if not scores:
        raise NoCandidates("Score table is empty")

    best_id, best_score = None, 0.0
    for repo_id, score in scores.items():
        if best_id is None or score > best_score:
            best_id, best_score = repo_id, score
    return Decision(chosen_repository_id=best_id, score=best_score)
