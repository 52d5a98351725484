"""Error classes shared by the GlyphScope packages.

- GlyphScopeError: Base exception class for all GlyphScope errors
- FlagError: Raised for an invalid flag string
- ConfigError: Raised for invalid configuration values
"""


class GlyphScopeError(Exception):
    """Base exception for all GlyphScope errors."""

    pass


class FlagError(GlyphScopeError):
    """Raised when a flag string holds an unknown or repeated flag."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class ConfigError(GlyphScopeError):
    """Raised when configuration values are invalid."""

    pass
