"""検索クエリの構築

repo: 条件で候補を絞り込み、ファイル名とコードトークンで内容を一致させる。
1回の検索で全候補を順位付けできる。
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from stripsolver.core.errors import NoCandidates
from stripsolver.core.models import Repository

from .reducer import DEFAULT_REDACTION_MARKER


def quote(value: str) -> str:
    """完全一致用に引用符で囲む"""
    return json.dumps(value, ensure_ascii=False)


def repo_terms(repos: Sequence[Repository]) -> list[str]:
    return [f"repo:{quote(repo.full_name)}" for repo in repos]


def file_name_terms(
    repos: Sequence[Repository],
    file_name_hint: str | None,
    marker: str = DEFAULT_REDACTION_MARKER,
) -> list[str]:
    """ファイル名条件

    伏字を含む場合は候補ごとに伏字をリポジトリ名で置き換えた条件を作る。
    """
    if not file_name_hint:
        return []
    if marker in file_name_hint:
        names = [file_name_hint.replace(marker, repo.name, 1) for repo in repos]
    else:
        names = [file_name_hint]
    return [f"filename:{quote(name)}" for name in names]


def build_query(
    repos: Sequence[Repository],
    file_name_hint: str | None,
    code_token: str,
    marker: str = DEFAULT_REDACTION_MARKER,
) -> str:
    """検索クエリを構築する

    条件の順序は repo 条件、ファイル名条件、コード条件（1つ）で固定。

    Raises:
        NoCandidates: 候補が空の場合
    """
    if not repos:
        raise NoCandidates("Cannot build a query without candidate repositories")

    terms = [
        *repo_terms(repos),
        *file_name_terms(repos, file_name_hint, marker),
        quote(code_token),
    ]
    return " ".join(terms)
