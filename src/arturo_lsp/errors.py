"""
Exception types shared across arturo-lsp.

The classifier, symbol builder and diagnostics engine never raise on
document text; these exceptions cover configuration, the static catalog
and request-level rejections.
"""

from typing import Optional


class ArturoLspError(Exception):
    """Base class for arturo-lsp errors."""


class ConfigError(ArturoLspError):
    """Configuration file or settings payload could not be used."""
    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        self.message = message
        if path:
            super().__init__(f"Config error in {path}: {message}")
        else:
            super().__init__(f"Config error: {message}")


class CatalogError(ArturoLspError):
    """The builtin catalog is missing or malformed."""


class RenameError(ArturoLspError):
    """A rename request was rejected."""
    def __init__(self, message: str, new_name: str = ""):
        self.new_name = new_name
        self.message = message
        super().__init__(message)
