"""GitHub ログイン

ユーザー名・パスワード・2要素認証コードで GitHub にログインする。
資格情報は環境変数から取得し、未設定の場合は端末で入力を求める。
"""

from __future__ import annotations

import asyncio
import getpass
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stripsolver.core.config import SessionConfig

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginSelectors:
    """GitHub ログインフォームのCSSセレクタ"""

    username: str = "form [name='login']"
    password: str = "form [name='password']"
    otp: str = "form [name='otp']"
    submit: str = "form [type='submit']"


@dataclass(frozen=True)
class Credentials:
    """GitHub 資格情報"""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def load_credentials(config: SessionConfig) -> Credentials:
    """資格情報を取得する（環境変数 → 端末入力）"""
    username = os.environ.get(config.username_env) or input("Enter GH username: ")
    password = os.environ.get(config.password_env) or getpass.getpass("Enter GH password: ")
    return Credentials(username=username, password=password)


def prompt_otp() -> str:
    """2要素認証コードを端末で入力する"""
    return input("Enter 2FA code: ").strip()


async def login(
    page: Page,
    credentials: Credentials,
    otp_provider: Callable[[], str] = prompt_otp,
    selectors: LoginSelectors | None = None,
) -> None:
    """ログインフォームを送信する

    Args:
        page: GitHub ログイン画面を表示しているページ
        credentials: 資格情報
        otp_provider: 2要素認証コードを返す関数（ブロッキング可）
        selectors: ログインフォームのセレクタ
    """
    s = selectors or LoginSelectors()

    await page.fill(s.username, credentials.username)
    await page.fill(s.password, credentials.password)
    async with page.expect_navigation():
        await page.click(s.submit)

    otp_code = await asyncio.to_thread(otp_provider)

    await page.fill(s.otp, otp_code)
    async with page.expect_navigation():
        await page.click(s.submit)

    logger.info("GitHub にログインしました: user=%s", credentials.username)
