"""GitHub関連モジュール

候補リポジトリの解決とコード検索のためのクライアント。
"""

from stripsolver.github.client import GitHubClient, GitHubClientError

__all__ = [
    "GitHubClient",
    "GitHubClientError",
]
