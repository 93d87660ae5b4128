"""コード断片の縮約

コードから最も特徴的な（最長の）トークンを1つ選ぶ。
"""

from __future__ import annotations

import re

from stripsolver.core.errors import EmptyEvidence

DEFAULT_REDACTION_MARKER = "redacted"

TOKEN_PATTERN = re.compile(r"[0-9A-Za-z_-]{1,128}")


def candidate_tokens(code_block: str | None, marker: str = DEFAULT_REDACTION_MARKER) -> list[str]:
    """伏字を含まないトークンを出現順に返す"""
    if not code_block:
        return []
    marker = marker.lower()
    return [token for token in TOKEN_PATTERN.findall(code_block) if marker not in token.lower()]


def reduce_snippet(code_block: str | None, marker: str = DEFAULT_REDACTION_MARKER) -> str:
    """最長トークンを返す

    同じ長さのトークンが複数ある場合は最初に出現したものを返す。

    Args:
        code_block: 表示コード
        marker: 伏字マーカー（大文字小文字を区別しない）

    Returns:
        最長トークン

    Raises:
        EmptyEvidence: 有効なトークンが1つもない場合
    """
    tokens = candidate_tokens(code_block, marker)
    if not tokens:
        raise EmptyEvidence("No usable token in code block")

    longest = tokens[0]
    for token in tokens[1:]:
        if len(token) > len(longest):
            longest = token
    return longest
