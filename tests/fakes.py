"""テスト用の協調者フェイク"""

from __future__ import annotations

from collections.abc import Sequence

from stripsolver.core.models import Repository, SearchHit


def make_repo(repo_id: int, owner: str, name: str) -> Repository:
    """テスト用Repositoryを生成"""
    return Repository(id=repo_id, owner=owner, name=name, full_name=f"{owner}/{name}")


class FakeLookup:
    """RepositoryLookup のテスト用実装"""

    def __init__(self, repos: Sequence[Repository], failing: Sequence[int] = ()) -> None:
        self.repos = {repo.id: repo for repo in repos}
        self.failing = set(failing)
        self.calls: list[int] = []

    async def get_repository(self, repository_id: int) -> Repository:
        self.calls.append(repository_id)
        if repository_id in self.failing or repository_id not in self.repos:
            raise LookupError(f"404 Not Found: {repository_id}")
        return self.repos[repository_id]


class FakeOracle:
    """CodeSearch のテスト用実装"""

    def __init__(self, hits: Sequence[SearchHit] = (), error: Exception | None = None) -> None:
        self.hits = list(hits)
        self.error = error
        self.queries: list[str] = []

    async def search_code(self, query: str) -> list[SearchHit]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.hits)


class FakeReader:
    """UIReader のテスト用実装（セレクタ→値の辞書で応答）"""

    def __init__(
        self,
        texts: dict[str, str | None] | None = None,
        lists: dict[str, list[str]] | None = None,
        attributes: dict[tuple[str, str], list[str]] | None = None,
    ) -> None:
        self.texts = texts or {}
        self.lists = lists or {}
        self.attributes = attributes or {}
        self.waited: list[str] = []
        self.clicked: list[str] = []

    async def wait_for_elements(self, selectors: Sequence[str]) -> None:
        self.waited.extend(selectors)

    async def read_text(self, selector: str) -> str | None:
        return self.texts.get(selector)

    async def read_all(self, selector: str) -> list[str]:
        return list(self.lists.get(selector, []))

    async def read_attribute_all(self, selector: str, attribute: str) -> list[str]:
        return list(self.attributes.get((selector, attribute), []))

    async def click(self, selector: str) -> None:
        self.clicked.append(selector)

