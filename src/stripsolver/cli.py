"""StripSolver CLI

コマンドラインインターフェース。
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .core.config import LoggingConfig, StripSolverSettings, reload_settings


def configure_logging(config: LoggingConfig) -> None:
    """ルートロガーを設定"""
    logging.basicConfig(level=config.level, format=config.format)


def main(argv: list[str] | None = None):
    """メインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description="StripSolver - コード断片の出典リポジトリを推定して回答する",
        prog="stripsolver",
    )
    parser.add_argument("--config", help="設定ファイルパス（stripsolver.config.yaml）")

    subparsers = parser.add_subparsers(dest="command", help="利用可能なコマンド")

    # run コマンド
    run_parser = subparsers.add_parser("run", help="ラウンドを繰り返し解いて回答する")
    run_parser.add_argument(
        "--rounds", type=int, default=None, help="実行するラウンド数（0=無制限、省略時は設定値）"
    )
    run_parser.add_argument("--headful", action="store_true", help="ブラウザを表示して実行")

    # resolve コマンド（オフライン判定）
    resolve_parser = subparsers.add_parser("resolve", help="証拠JSONから判定のみ行う")
    resolve_parser.add_argument("evidence", help="RoundEvidence 形式のJSONファイル")

    # login コマンド
    subparsers.add_parser("login", help="ログインしてCookieを保存する")

    args = parser.parse_args(argv)

    settings = reload_settings(args.config)
    configure_logging(settings.logging)

    if args.command == "run":
        run_rounds(args, settings)
    elif args.command == "resolve":
        run_resolve(args, settings)
    elif args.command == "login":
        run_login(settings)
    else:
        parser.print_help()
        sys.exit(1)


def run_rounds(args, settings: StripSolverSettings):
    """ラウンドループを実行"""
    if args.headful:
        settings.session.headless = False
    try:
        summary = asyncio.run(_run_rounds(settings, args.rounds))
    except KeyboardInterrupt:
        print("\n中断しました")
        return

    print(
        f"✓ {summary.rounds} ラウンド実行 "
        f"(判定 {summary.decided} / 失敗 {summary.failed} / エラー {summary.errors})"
    )
    if summary.last_stats:
        for label, value in summary.last_stats.items():
            print(f"  {label}: {value}")


async def _run_rounds(settings: StripSolverSettings, rounds: int | None):
    from .browser import BrowserSession
    from .engine import EvidenceExtractor, RoundResolver
    from .github import GitHubClient
    from .runner import RoundRunner

    async with (
        GitHubClient(settings.github) as github,
        BrowserSession(settings.session, settings.get_cookies_path()) as session,
    ):
        await session.ensure_authenticated()
        resolver = RoundResolver(
            lookup=github,
            oracle=github,
            redaction_marker=settings.engine.redaction_marker,
        )
        runner = RoundRunner(
            driver=session.driver,
            resolver=resolver,
            config=settings.runner,
            extractor=EvidenceExtractor(),
            session=session,
        )
        return await runner.run(max_rounds=rounds)


def run_resolve(args, settings: StripSolverSettings):
    """証拠JSONから判定を表示"""
    from .core.models import RoundEvidence

    evidence_path = Path(args.evidence)
    if not evidence_path.exists():
        print(f"エラー: ファイルが見つかりません: {evidence_path}", file=sys.stderr)
        sys.exit(1)

    evidence = RoundEvidence.model_validate_json(evidence_path.read_text(encoding="utf-8"))
    outcome = asyncio.run(_resolve(settings, evidence))
    print(json.dumps(outcome.model_dump(mode="json"), ensure_ascii=False, indent=2))
    if not outcome.is_decided:
        sys.exit(2)


async def _resolve(settings: StripSolverSettings, evidence):
    from .engine import RoundResolver
    from .github import GitHubClient

    async with GitHubClient(settings.github) as github:
        resolver = RoundResolver(
            lookup=github,
            oracle=github,
            redaction_marker=settings.engine.redaction_marker,
        )
        return await resolver.resolve_round(evidence)


def run_login(settings: StripSolverSettings):
    """ログインしてCookieを保存"""
    cookies_path = asyncio.run(_login(settings))
    print(f"✓ Cookieを保存しました: {cookies_path}")


async def _login(settings: StripSolverSettings):
    from .browser import BrowserSession

    cookies_path = settings.get_cookies_path()
    async with BrowserSession(settings.session, cookies_path) as session:
        await session.ensure_authenticated()
        await session.save_cookies()
    return cookies_path


if __name__ == "__main__":
    main()
