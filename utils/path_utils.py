"""
Path helpers for caller supplied file references
"""

from datetime import datetime
from pathlib import Path
from typing import Union

from utils.exceptions import UnsafePathError


def resolve_safe_path(base_dir: Union[str, Path], rel_path: str) -> Path:
    """
    Resolve a relative path inside base_dir, refusing anything that escapes it

    Args:
        base_dir: Allowed base directory
        rel_path: Relative path from the caller (absolute paths are rejected)

    Returns:
        Absolute path inside base_dir
    """
    if Path(rel_path).is_absolute():
        raise UnsafePathError("Absolute paths are not allowed")

    base = Path(base_dir).resolve()
    candidate = (base / rel_path.lstrip("/\\")).resolve()

    if candidate != base and base not in candidate.parents:
        raise UnsafePathError("Path escape detected")

    return candidate


def file_info(abs_path: Path, base_dir: Path) -> dict:
    """Describe a file relative to base_dir"""
    stat = abs_path.stat()
    return {
        "rel_path": str(abs_path.relative_to(base_dir)),
        "abs_path": str(abs_path),
        "size": stat.st_size,
        "mtime": datetime.fromtimestamp(stat.st_mtime).isoformat(),
    }
