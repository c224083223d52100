"""
Browser process adapters.
"""

from .binary import BrowserBinaryResolver, find_system_browser
from .process import SubprocessLauncher

__all__ = ['BrowserBinaryResolver', 'SubprocessLauncher', 'find_system_browser']
