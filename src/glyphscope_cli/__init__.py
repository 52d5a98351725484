"""
GlyphScope CLI - command line front end for the analyzer
"""

from .main import app

__all__ = ["app"]
