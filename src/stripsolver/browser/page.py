"""Playwright ページ操作

UIReader プロトコルを Playwright の Page で実装する。
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from playwright.async_api import Page


class PageDriver:
    """Playwright の Page を UIReader として扱うアダプタ

    要素待機のタイムアウトは Playwright に委ねる。
    """

    def __init__(self, page: Page, timeout_ms: int = 30000) -> None:
        """初期化

        Args:
            page: Playwrightのページオブジェクト
            timeout_ms: 要素待機・クリックのタイムアウト（ミリ秒）
        """
        self._page = page
        self._timeout_ms = timeout_ms

    async def wait_for_elements(self, selectors: Sequence[str]) -> None:
        """全要素の出現を並行に待つ"""
        await asyncio.gather(
            *(self._page.wait_for_selector(s, timeout=self._timeout_ms) for s in selectors)
        )

    async def read_text(self, selector: str) -> str | None:
        """最初に一致した要素のテキスト（要素がなければ None）"""
        handle = await self._page.query_selector(selector)
        if handle is None:
            return None
        return await handle.text_content()

    async def read_all(self, selector: str) -> list[str]:
        """一致した全要素のテキスト"""
        return await self._page.eval_on_selector_all(
            selector, "els => els.map(el => el.textContent || '')"
        )

    async def read_attribute_all(self, selector: str, attribute: str) -> list[str]:
        """一致した全要素の属性値"""
        return await self._page.eval_on_selector_all(
            selector,
            "(els, name) => els.map(el => el.getAttribute(name) || '')",
            attribute,
        )

    async def click(self, selector: str) -> None:
        await self._page.click(selector, timeout=self._timeout_ms)
