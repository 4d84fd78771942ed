import logging
import os
from typing import Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def is_absolute_uri(uri: str) -> bool:
    try:
        _part = urlparse(uri)
    except (TypeError, ValueError):
        return False
    return bool(_part.scheme and _part.netloc)


def full_path(path: str, base_path: Optional[str] = "") -> str:
    """Paths that are not absolute are taken relative to base_path."""
    if not path or os.path.isabs(path) or not base_path:
        return path
    return os.path.join(base_path, path)
