"""Callbook - appointment booking through outbound provider calls"""

__version__ = "0.1.0"
