"""ブラウザ操作モジュール

Playwright による認証済みセッションとページ操作。
"""

from .auth import Credentials, LoginSelectors, load_credentials, login
from .page import PageDriver
from .session import BrowserSession, BrowserSessionError

__all__ = [
    "BrowserSession",
    "BrowserSessionError",
    "Credentials",
    "LoginSelectors",
    "PageDriver",
    "load_credentials",
    "login",
]
