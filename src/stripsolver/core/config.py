"""StripSolver 設定管理モジュール

Pydantic Settingsを使用した型安全な設定管理。
stripsolver.config.yaml と環境変数から設定を読み込む。
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitHubConfig(BaseModel):
    """GitHub API 設定"""

    base_url: str = Field(default="https://api.github.com", description="REST APIのベースURL")
    token_env: str = Field(default="GH_TOKEN", description="トークンの環境変数名")
    user_agent: str = Field(default="stripsolver", description="User-Agentヘッダー")
    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTPタイムアウト秒")
    per_page: int = Field(default=100, ge=1, le=100, description="コード検索の取得件数")


class SessionConfig(BaseModel):
    """ブラウザセッション設定"""

    start_url: str = Field(default="https://stripcode.dev/ranked")
    login_host: str = Field(default="github.com", description="ログインが必要と判定するホスト")
    cookies_path: str = Field(default="run/cookies.json", description="Cookie保存先")
    headless: bool = Field(default=True)
    navigation_timeout_ms: int = Field(default=30000, ge=1000, description="要素待機タイムアウト")
    username_env: str = Field(default="GH_USERNAME", description="ユーザー名の環境変数名")
    password_env: str = Field(default="GH_PASSWORD", description="パスワードの環境変数名")


class EngineConfig(BaseModel):
    """ラウンド解決エンジン設定"""

    redaction_marker: str = Field(default="redacted", min_length=1, description="伏字マーカー")


class RunnerConfig(BaseModel):
    """ラウンドループ設定"""

    idle_seconds: float = Field(
        default=0.5, ge=0.0, description="回答後・次問題遷移後の待機秒（検索API負荷対策）"
    )
    failure_backoff_seconds: float = Field(default=1.0, ge=0.0, description="失敗ラウンド後の待機秒")
    max_failure_backoff_seconds: float = Field(
        default=60.0, ge=0.0, description="同じ失敗が続いた場合の待機秒の上限"
    )
    max_rounds: int = Field(default=0, ge=0, description="最大ラウンド数（0=無制限）")


class LoggingConfig(BaseModel):
    """ロギング設定"""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")


class StripSolverSettings(BaseSettings):
    """StripSolver全体設定

    設定の優先順位:
    1. 環境変数
    2. stripsolver.config.yaml
    3. デフォルト値
    """

    model_config = SettingsConfigDict(
        env_prefix="STRIPSOLVER_",
        env_nested_delimiter="__",
    )

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path | str | None = None) -> "StripSolverSettings":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス。Noneの場合はデフォルトパスを探索

        Returns:
            StripSolverSettings インスタンス
        """
        if config_path is None:
            search_paths = [
                Path.cwd() / "stripsolver.config.yaml",
                Path.cwd() / "stripsolver.config.yml",
                Path.home() / ".stripsolver" / "config.yaml",
            ]
            for path in search_paths:
                if path.exists():
                    config_path = path
                    break

        if config_path and Path(config_path).exists():
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
            return cls.model_validate(yaml_config)

        return cls()

    def get_cookies_path(self) -> Path:
        """Cookie保存先を絶対パスで取得"""
        path = Path(self.session.cookies_path)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path.resolve()


# グローバル設定インスタンス（遅延初期化）
_settings: StripSolverSettings | None = None


def get_settings() -> StripSolverSettings:
    """設定シングルトンを取得"""
    global _settings
    if _settings is None:
        _settings = StripSolverSettings.from_yaml()
    return _settings


def reload_settings(config_path: Path | str | None = None) -> StripSolverSettings:
    """設定を再読み込み"""
    global _settings
    _settings = StripSolverSettings.from_yaml(config_path)
    return _settings
