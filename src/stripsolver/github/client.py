"""GitHub REST API クライアント

httpx ベースの非同期クライアント。
候補リポジトリの解決（/repositories/{id}）とコード検索（/search/code）を提供する。
GitHub.com / GitHub Enterprise Server の両方をサポート。
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from stripsolver.core.config import GitHubConfig
from stripsolver.core.models import Repository, SearchHit

logger = logging.getLogger(__name__)


class GitHubClientError(Exception):
    """GitHub API 呼び出しに関するエラー"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """GitHub REST API クライアント

    RepositoryLookup / CodeSearch の両プロトコルを満たす。
    全操作は非同期で、httpx.AsyncClient を使用する。

    運用上の注意:
        - トークンは環境変数で管理（config.token_env で指定）
        - トークン未設定でもリポジトリ取得は可能（匿名レート制限）
        - コード検索はトークン必須

    Args:
        config: GitHubConfig インスタンス
    """

    def __init__(self, config: GitHubConfig | None = None) -> None:
        self._config = config or GitHubConfig()
        self._base_url = self._config.base_url.rstrip("/")
        self._token = os.environ.get(self._config.token_env, "")
        self._http_client: httpx.AsyncClient | None = None

    # ------------------------------------------------------------------
    # プロパティ
    # ------------------------------------------------------------------

    @property
    def token(self) -> str:
        return self._token

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # リポジトリ操作
    # ------------------------------------------------------------------

    async def get_repository(self, repository_id: int) -> Repository:
        """IDからリポジトリを取得する

        Args:
            repository_id: GitHubリポジトリID

        Returns:
            正規のオーナー名・リポジトリ名を持つ Repository

        Raises:
            GitHubClientError: 存在しない、またはAPI呼び出しに失敗した場合
        """
        data = await self._get(f"{self._base_url}/repositories/{repository_id}")
        try:
            return Repository.from_api(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise GitHubClientError(
                f"Unexpected repository payload for id {repository_id}: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # 検索操作
    # ------------------------------------------------------------------

    async def search_code(self, query: str) -> list[SearchHit]:
        """コード検索を実行する

        Args:
            query: GitHub コード検索クエリ

        Returns:
            ヒットのリスト（順序は保証しない）

        Raises:
            GitHubClientError: トークン未設定、またはAPI呼び出しに失敗した場合
        """
        if not self._token:
            raise GitHubClientError(
                f"GitHub token not found in environment variable '{self._config.token_env}'. "
                "Code search requires an authenticated request."
            )

        data = await self._get(
            f"{self._base_url}/search/code",
            params={"q": query, "per_page": self._config.per_page},
        )
        if data.get("incomplete_results"):
            logger.warning("コード検索の結果が不完全です: q=%s", query)

        hits: list[SearchHit] = []
        for item in data.get("items", []):
            try:
                hits.append(
                    SearchHit(
                        repository_id=item["repository"]["id"],
                        relevance=float(item.get("score") or 0.0),
                        path=item.get("path"),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise GitHubClientError(f"Unexpected search item payload: {exc}") from exc
        return hits

    async def close(self) -> None:
        """クライアントを閉じる"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # 内部ヘルパー
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        """共通リクエストヘッダー"""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": self._config.user_agent,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """HTTPクライアントを取得"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                headers=self._headers(), timeout=self._config.timeout_seconds
            )
        return self._http_client

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET リクエストを送信"""
        try:
            response = await self._get_client().get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status in (403, 429):
                logger.warning(
                    "GitHub レートリミット: status=%d, reset=%s",
                    status,
                    exc.response.headers.get("X-RateLimit-Reset"),
                )
            raise GitHubClientError(str(exc), status_code=status) from exc
        except Exception as exc:
            raise GitHubClientError(str(exc)) from exc
