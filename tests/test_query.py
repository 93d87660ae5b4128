"""検索クエリ構築のテスト"""

import pytest

from stripsolver.core.errors import NoCandidates
from stripsolver.engine.query import build_query, file_name_terms, quote

from fakes import make_repo


class TestBuildQuery:
    """build_query のテスト"""

    def test_redacted_file_name_expands_per_candidate(self, repos):
        """伏字入りファイル名は候補ごとに展開される"""
        # Act
        query = build_query(repos, "redacted.py", "computeChecksum")

        # Assert: repo条件 → ファイル名条件 → コード条件 の順
        assert query == (
            'repo:"x/proj1" repo:"y/proj2" '
            'filename:"proj1.py" filename:"proj2.py" '
            '"computeChecksum"'
        )

    def test_literal_file_name_single_term(self, repos):
        """伏字なしのファイル名は1条件のみ"""
        # Act
        query = build_query(repos, "setup.py", "install_requires")

        # Assert
        assert query == 'repo:"x/proj1" repo:"y/proj2" filename:"setup.py" "install_requires"'

    @pytest.mark.parametrize("hint", [None, ""])
    def test_missing_file_name_adds_no_term(self, repos, hint):
        """ファイル名がなければファイル名条件なし"""
        # Act
        query = build_query(repos, hint, "token")

        # Assert
        assert "filename:" not in query
        assert query.endswith('"token"')

    def test_exactly_one_code_term(self, repos):
        """コード条件は常に1つ"""
        # Act
        query = build_query(repos, "redacted_test.go", "tok")

        # Assert
        terms = query.split(" ")
        assert [t for t in terms if not t.startswith(("repo:", "filename:"))] == ['"tok"']

    def test_empty_candidates_raises(self):
        """候補がなければクエリを構築しない"""
        with pytest.raises(NoCandidates):
            build_query([], "redacted.py", "tok")


class TestFileNameTerms:
    """file_name_terms のテスト"""

    def test_only_first_marker_is_replaced(self):
        """伏字は最初の1箇所だけ置き換える"""
        # Arrange
        repos = [make_repo(7, "o", "lib")]

        # Act
        terms = file_name_terms(repos, "redacted/redacted.c")

        # Assert
        assert terms == ['filename:"lib/redacted.c"']


class TestQuote:
    """quote のテスト"""

    def test_escapes_quotes(self):
        """引用符はエスケープされる"""
        assert quote('a"b') == '"a\\"b"'
