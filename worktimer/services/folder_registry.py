"""
Folder Registry - Ordered folder names with style records and selection.

Ordering rule: every add re-sorts the list alphabetically. A manual reorder
holds only until the next add.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional

from worktimer.domain.models import FolderStyle


class FolderLookup(str, Enum):
    """Outcome of resolving a task's folder reference"""
    UNCATEGORIZED = "uncategorized"
    FOUND = "found"
    ORPHANED = "orphaned"


class FolderRegistry:
    """
    Owns the folder list, per-folder style records and the active selection.

    Folder names are their own keys and are never duplicated.
    """

    def __init__(self):
        self._folders: List[str] = []
        self._styles: Dict[str, FolderStyle] = {}
        self.selected: Optional[str] = None

    def __contains__(self, name: object) -> bool:
        return name in self._styles

    def __len__(self) -> int:
        return len(self._folders)

    def names(self) -> List[str]:
        return list(self._folders)

    def styles(self) -> Dict[str, FolderStyle]:
        return dict(self._styles)

    def index_of(self, name: str) -> int:
        return self._folders.index(name)

    def add(self, name: str) -> bool:
        """
        Register a folder.

        Returns:
            False for a blank or already registered name (nothing changes)
        """
        if not name or not name.strip() or name in self._styles:
            return False
        self._styles[name] = FolderStyle(name=name)
        self._folders.append(name)
        self._folders.sort()
        if self.selected is None:
            self.selected = name
        return True

    def remove(self, name: str) -> bool:
        """
        Unregister a folder. Removing its tasks is up to the caller.

        If the folder was selected, selection falls back to the first
        remaining folder (or None).
        """
        if name not in self._styles:
            return False
        self._folders.remove(name)
        del self._styles[name]
        if self.selected == name:
            self.selected = self._folders[0] if self._folders else None
        return True

    def reorder(self, name: str, new_index: int) -> bool:
        """Move a folder to new_index (clamped into range)"""
        if name not in self._styles:
            return False
        self._folders.remove(name)
        new_index = max(0, min(new_index, len(self._folders)))
        self._folders.insert(new_index, name)
        return True

    def select(self, name: Optional[str]) -> bool:
        if name is not None and name not in self._styles:
            return False
        self.selected = name
        return True

    def clear(self) -> List[str]:
        removed = list(self._folders)
        self._folders.clear()
        self._styles.clear()
        self.selected = None
        return removed

    def lookup(self, folder: Optional[str]) -> FolderLookup:
        if folder is None:
            return FolderLookup.UNCATEGORIZED
        if folder in self._styles:
            return FolderLookup.FOUND
        return FolderLookup.ORPHANED

    def load(self, names: Iterable[str], styles: Dict[str, FolderStyle]) -> None:
        """
        Replace the registry contents from persisted snapshots.

        Duplicate and blank names are dropped (first occurrence wins), missing
        style records are recreated and styles for unknown folders discarded.
        The persisted order is kept as-is. Selection resets to the first folder.
        """
        self._folders = []
        self._styles = {}
        for name in names:
            if not name or not name.strip() or name in self._styles:
                continue
            self._folders.append(name)
            self._styles[name] = styles.get(name) or FolderStyle(name=name)
        self.selected = self._folders[0] if self._folders else None
