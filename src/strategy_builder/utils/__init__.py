"""
Utility helpers: logging facade and platform paths.
"""
from strategy_builder.utils.message import Log

__all__ = ['Log']
