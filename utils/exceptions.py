"""
Custom exceptions for Poster Card Generator
"""

from pathlib import Path


class PosterError(Exception):
    """Base class for poster rendering errors"""


class TemplateNotFoundError(PosterError):
    """
    Raised when a template directory does not exist.
    """

    def __init__(self, template_dir: Path, message: str = None):
        self.template_dir = Path(template_dir)
        self.message = message or f"Template directory not found: {self.template_dir}"
        super().__init__(self.message)


class TemplateFileMissingError(PosterError, FileNotFoundError):
    """
    Raised when one of the required template background images is missing.

    This is fatal for the whole render call; it is raised before any
    output directory is created.
    """

    def __init__(self, path: Path, message: str = None):
        self.path = Path(path)
        self.message = message or f"Template image missing: {self.path}"
        super().__init__(self.message)


class UnsafePathError(PosterError, ValueError):
    """Raised when a caller supplied path escapes its base directory"""
