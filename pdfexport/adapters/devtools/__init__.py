"""
DevTools protocol adapters (aiohttp readiness check, Playwright sessions).
"""

from .http import DevToolsHttpClient
from .session import PlaywrightDevToolsSession
from .targets import TargetManager

__all__ = ['DevToolsHttpClient', 'PlaywrightDevToolsSession', 'TargetManager']
