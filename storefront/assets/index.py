"""Local asset index: normalized name -> bundled image handle."""
import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from storefront.logging import get_logger
from .manifest import BUNDLED_ASSETS, COMPACT_ALIASES, IMAGE_EXTENSIONS

logger = get_logger(__name__)

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_SEPARATOR_RUN_RE = re.compile(r"[_\-\s]+")


def strip_extension(name: str) -> str:
    return _EXTENSION_RE.sub("", name)


def make_key(filename: str) -> str:
    """Index key for a file: name without extension, lowercased."""
    return strip_extension(filename).lower()


class AssetIndex:
    """
    Read-only mapping from lowercase keys to asset handles.

    A handle is the position of the file in `files`, so `path_for(handle)`
    recovers the bundled file name.
    """

    def __init__(self, mapping: Optional[Mapping[str, int]] = None, files: Optional[List[str]] = None):
        self._map: Dict[str, int] = dict(mapping or {})
        self.files: List[str] = list(files or [])

    @classmethod
    def from_filenames(cls, filenames: Iterable[str], aliases: Optional[Mapping[str, str]] = None) -> "AssetIndex":
        files = list(filenames)
        mapping: Dict[str, int] = {}
        for handle, filename in enumerate(files):
            key = make_key(filename)
            if key in mapping:
                logger.debug(f"Duplicate asset key {key!r}: keeping {files[mapping[key]]!r}")
                continue
            mapping[key] = handle

        for alias, filename in (aliases or {}).items():
            key = make_key(filename)
            if key in mapping:
                mapping[alias] = mapping[key]

        return cls(mapping, files)

    @classmethod
    def from_directory(cls, directory: str | Path, aliases: Optional[Mapping[str, str]] = None) -> "AssetIndex":
        """Index every image file directly inside directory (sorted by name)."""
        root = Path(directory)
        filenames = sorted(
            p.name for p in root.iterdir()
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
        )
        logger.info(f"Indexed {len(filenames)} bundled asset(s) from {root}")
        return cls.from_filenames(filenames, aliases)

    @classmethod
    def bundled(cls) -> "AssetIndex":
        return cls.from_filenames(BUNDLED_ASSETS, COMPACT_ALIASES)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def get(self, key: str) -> Optional[int]:
        return self._map.get(key)

    def path_for(self, handle: int) -> Optional[str]:
        if 0 <= handle < len(self.files):
            return self.files[handle]
        return None

    def lookup(self, key: object) -> Optional[int]:
        """
        Find a handle for key.

        Tries the lowercase key, then separator runs (_ - whitespace)
        collapsed to one space, then collapsed to one underscore.
        """
        if key is None or key == "":
            return None
        lowered = str(key).lower()
        candidates = (
            lowered,
            _SEPARATOR_RUN_RE.sub(" ", lowered).strip(),
            _SEPARATOR_RUN_RE.sub("_", lowered).strip(),
        )
        for candidate in candidates:
            if candidate in self._map:
                return self._map[candidate]
        return None
