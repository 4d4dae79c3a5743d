"""
Built-in components.
"""

from .logger import DefaultLogger

__all__ = ['DefaultLogger']
