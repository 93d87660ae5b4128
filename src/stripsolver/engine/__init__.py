"""ラウンド解決エンジン

証拠抽出 → 縮約 → 候補解決 → クエリ構築 → 検索 → 集計 → 判定。
"""

from .extractor import EvidenceExtractor, RoundSelectors, parse_stats
from .query import build_query
from .reducer import reduce_snippet
from .resolver import CandidateResolver
from .round import RoundResolver
from .scoring import aggregate, select_best

__all__ = [
    "CandidateResolver",
    "EvidenceExtractor",
    "RoundResolver",
    "RoundSelectors",
    "aggregate",
    "build_query",
    "parse_stats",
    "reduce_snippet",
    "select_best",
]
