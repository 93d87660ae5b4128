"""ブラウザセッション管理

Playwright のブラウザを起動し、Cookie を永続化して認証済みページを維持する。
非同期コンテキストマネージャとして使う:

    async with BrowserSession(settings.session, cookies_path) as session:
        await session.ensure_authenticated()
        driver = session.driver
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from stripsolver.core.config import SessionConfig

from .auth import Credentials, load_credentials, login, prompt_otp
from .page import PageDriver

logger = logging.getLogger(__name__)


class BrowserSessionError(Exception):
    """ブラウザセッションに関するエラー"""


class BrowserSession:
    """認証済みブラウザセッション

    取得は1回、期限切れ（ログイン画面へのリダイレクト）時は再ログイン、
    終了時にブラウザを閉じる。
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        cookies_path: Path | str | None = None,
        credentials_provider: Callable[[], Credentials] | None = None,
        otp_provider: Callable[[], str] = prompt_otp,
    ) -> None:
        self._config = config or SessionConfig()
        self._cookies_path = Path(cookies_path or self._config.cookies_path)
        self._credentials_provider = credentials_provider or (
            lambda: load_credentials(self._config)
        )
        self._otp_provider = otp_provider
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None
        self._driver: PageDriver | None = None

    async def __aenter__(self) -> BrowserSession:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # ライフサイクル
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """ブラウザを起動（起動済みなら何もしない）"""
        if self._page is not None:
            return

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._config.headless)
        self._context = await self._browser.new_context()
        self._page = await self._context.new_page()
        self._driver = PageDriver(self._page, timeout_ms=self._config.navigation_timeout_ms)

    async def close(self) -> None:
        """ブラウザを閉じる"""
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()
        self._driver = None
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise BrowserSessionError("Browser not started")
        return self._page

    @property
    def driver(self) -> PageDriver:
        if self._driver is None:
            raise BrowserSessionError("Browser not started")
        return self._driver

    # ------------------------------------------------------------------
    # 認証
    # ------------------------------------------------------------------

    def needs_login(self) -> bool:
        """現在のページがログイン画面か"""
        return urlparse(self.page.url).hostname == self._config.login_host

    async def ensure_authenticated(self) -> None:
        """保存済みCookieで開始ページを開き、必要ならログインする"""
        context = self._require_context()
        cookies = self.load_cookies()
        if cookies:
            try:
                await context.add_cookies(cookies)
            except PlaywrightError as exc:
                logger.warning("保存済みCookieを適用できません: %s (%s)", self._cookies_path, exc)
        else:
            logger.info("保存済みCookieがありません: %s", self._cookies_path)

        await self.page.goto(self._config.start_url)
        if self.needs_login():
            await self.login()

    async def login(self) -> None:
        """ログインして Cookie を保存する"""
        if not self.needs_login():
            raise BrowserSessionError(f"Expected a login page, got {self.page.url}")

        credentials = self._credentials_provider()
        await login(self.page, credentials, otp_provider=self._otp_provider)
        if self.needs_login():
            raise BrowserSessionError("Login did not leave the login page")
        await self.save_cookies()

    # ------------------------------------------------------------------
    # Cookie 永続化
    # ------------------------------------------------------------------

    def load_cookies(self) -> list[dict[str, Any]]:
        """保存済みCookieを読む（存在しない・壊れている場合は空）"""
        try:
            data = json.loads(self._cookies_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Cookieファイルを読めません: %s (%s)", self._cookies_path, exc)
            return []
        return data if isinstance(data, list) else []

    async def save_cookies(self) -> Path:
        """現在のCookieを保存する"""
        cookies = await self._require_context().cookies()
        self._cookies_path.parent.mkdir(parents=True, exist_ok=True)
        self._cookies_path.write_text(json.dumps(cookies, indent=2), encoding="utf-8")
        logger.info("Cookieを保存しました: %s", self._cookies_path)
        return self._cookies_path

    def _require_context(self) -> BrowserContext:
        if self._context is None:
            raise BrowserSessionError("Browser not started")
        return self._context
