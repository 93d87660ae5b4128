"""ラウンド解決エンジンが利用する外部協調者のプロトコル"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from stripsolver.core.models import Repository, SearchHit


class UIReader(Protocol):
    """描画済みラウンド画面の読み取り・操作"""

    async def wait_for_elements(self, selectors: Sequence[str]) -> None: ...

    async def read_text(self, selector: str) -> str | None: ...

    async def read_all(self, selector: str) -> list[str]: ...

    async def read_attribute_all(self, selector: str, attribute: str) -> list[str]: ...

    async def click(self, selector: str) -> None: ...


class RepositoryLookup(Protocol):
    """リポジトリIDから正規のリポジトリ情報を取得する"""

    async def get_repository(self, repository_id: int) -> Repository: ...


class CodeSearch(Protocol):
    """全文コード検索（オラクル）"""

    async def search_code(self, query: str) -> list[SearchHit]: ...
