"""Aternos server start bot"""

__version__ = "0.1.0"
