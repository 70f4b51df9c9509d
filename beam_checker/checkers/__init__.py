"""
Per-file checkers for BEAM rules.
"""

from .layout_checker import LayoutChecker
from .naming_checker import NamingChecker

__all__ = [
    'LayoutChecker',
    'NamingChecker',
]
