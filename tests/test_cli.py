"""CLIのテスト"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from stripsolver.cli import main
from stripsolver.core.models import SearchHit

from fakes import make_repo


@pytest.fixture
def evidence_file(tmp_path):
    """証拠JSONファイル"""
    path = tmp_path / "evidence.json"
    path.write_text(
        json.dumps(
            {
                "candidate_ids": [1, 2],
                "file_name_hint": "redacted.py",
                "code_block": "def computeChecksum(): pass",
            }
        )
    )
    return path


@pytest.fixture
def mock_github():
    """GitHubClient をモック"""
    repos = {1: make_repo(1, "x", "proj1"), 2: make_repo(2, "y", "proj2")}
    with patch("stripsolver.github.GitHubClient") as mock_cls:
        github = mock_cls.return_value
        github.__aenter__ = AsyncMock(return_value=github)
        github.__aexit__ = AsyncMock(return_value=False)
        github.get_repository = AsyncMock(side_effect=lambda repo_id: repos[repo_id])
        github.search_code = AsyncMock(return_value=[SearchHit(repository_id=2, relevance=1.0)])
        yield github


class TestCLI:
    """CLIのテスト"""

    def test_no_command_prints_help(self, capsys, tmp_path):
        """コマンドなしはヘルプを表示して終了"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "none.yaml")])

        assert exc_info.value.code == 1
        assert "stripsolver" in capsys.readouterr().out

    def test_resolve_prints_decision(self, evidence_file, mock_github, capsys, tmp_path):
        """resolve コマンドは判定をJSONで表示"""
        # Act
        main(["--config", str(tmp_path / "none.yaml"), "resolve", str(evidence_file)])

        # Assert
        output = json.loads(capsys.readouterr().out)
        assert output["status"] == "decided"
        assert output["decision"]["chosen_repository_id"] == 2
        mock_github.search_code.assert_awaited_once()

    def test_resolve_missing_file(self, capsys, tmp_path):
        """存在しない証拠ファイルはエラー終了"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "none.yaml"), "resolve", str(tmp_path / "x.json")])

        assert exc_info.value.code == 1
        assert "見つかりません" in capsys.readouterr().err
