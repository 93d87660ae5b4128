"""StripSolver テスト設定"""

from __future__ import annotations

import pytest

from fakes import FakeReader, make_repo
from stripsolver.core.models import Repository


@pytest.fixture
def repos() -> list[Repository]:
    """候補リポジトリ2件"""
    return [make_repo(1, "x", "proj1"), make_repo(2, "y", "proj2")]


@pytest.fixture
def round_page() -> FakeReader:
    """典型的なラウンド画面"""
    return FakeReader(
        texts={
            ".code-half h1": "redacted.py",
            "#main-code-block": "def computeChecksum(data):\n    return REDACTED_TOKEN_1(data)\n",
            ".code-half div.text-lg": "150 points",
            ".answer-half div.text-3xl.rounded": "  Correct!  ",
        },
        lists={
            "div.text-lg": [
                "Your total points: 1200",
                "Your rank: #42",
                "Active users: 17",
                "150 points",
            ],
        },
        attributes={
            ("[phx-value-githubrepoid]", "phx-value-githubrepoid"): ["1", "2", "1"],
        },
    )
