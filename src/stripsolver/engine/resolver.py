"""候補リポジトリの解決

画面上のリポジトリ名は実際の GitHub 上の名前と食い違うことがあるため、
正規の owner / name は常に API から取得する。
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from stripsolver.core.errors import LookupFailure, NoCandidates
from stripsolver.core.models import Repository

from .interfaces import RepositoryLookup

logger = logging.getLogger(__name__)


class CandidateResolver:
    """候補IDを Repository に解決する

    IDごとに1リクエストを並行発行し、全件の成功を待つ。
    1件でも失敗したら部分結果は使わず LookupFailure を送出する。
    解決済みのリポジトリはプロセス内でIDごとにキャッシュする。
    """

    def __init__(self, lookup: RepositoryLookup) -> None:
        self._lookup = lookup
        self._cache: dict[int, Repository] = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def resolve(self, ids: Sequence[int]) -> list[Repository]:
        """候補IDを解決する

        Args:
            ids: 候補リポジトリID（DOM順、重複可）

        Returns:
            初出順・重複除去済みの Repository リスト

        Raises:
            NoCandidates: 候補IDが空の場合
            LookupFailure: いずれかの取得に失敗した場合
        """
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            raise NoCandidates("Round presented no candidate repositories")

        missing = [repo_id for repo_id in unique_ids if repo_id not in self._cache]
        if missing:
            fetched = await asyncio.gather(*(self._fetch(repo_id) for repo_id in missing))
            for repo_id, repo in zip(missing, fetched):
                self._cache[repo_id] = repo

        return [self._cache[repo_id] for repo_id in unique_ids]

    async def _fetch(self, repository_id: int) -> Repository:
        """1件取得（失敗は LookupFailure に変換）"""
        try:
            repo = await self._lookup.get_repository(repository_id)
        except Exception as exc:
            raise LookupFailure(
                f"Could not resolve repository {repository_id}: {exc}",
                repository_id=repository_id,
            ) from exc

        logger.debug("候補を解決: %d -> %s", repository_id, repo.full_name)
        return repo
