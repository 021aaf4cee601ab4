"""Storage Keys — object-store keys derived from a random token and a file extension.

Invariants:
    - Key = uuid4 + extension of the original name; the name itself never appears
    - Extension kept only when it is 1-16 alphanumerics (no separators, no traversal)
"""

import re
import uuid
from pathlib import PurePosixPath

from article_service.core.domain_types import StorageKey

_SAFE_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


def file_extension(original_name: str) -> str:
    """Last suffix of the base name, or '' when absent or unsafe."""
    base = PurePosixPath(original_name.replace("\\", "/")).name
    suffix = PurePosixPath(base).suffix
    return suffix if _SAFE_EXTENSION.match(suffix) else ""


def make_storage_key(original_name: str) -> StorageKey:
    return StorageKey(f"{uuid.uuid4()}{file_extension(original_name)}")
