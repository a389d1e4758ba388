"""
zenpak - convert legacy PAK package headers into IO Store container header entries.
"""

__version__ = "0.1.0"
