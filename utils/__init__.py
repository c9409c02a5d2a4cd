"""
Utility Functions
"""

from .image_utils import (
    load_image,
    load_background,
    save_image,
)
from .path_utils import (
    resolve_safe_path,
    file_info,
)

__all__ = [
    "load_image",
    "load_background",
    "save_image",
    "resolve_safe_path",
    "file_info",
]
