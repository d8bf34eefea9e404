"""
Tests for the folder registry: ordering, styles and selection.
"""

import pytest

from worktimer.domain.models import FolderStyle
from worktimer.services.folder_registry import FolderLookup, FolderRegistry


@pytest.fixture
def registry():
    return FolderRegistry()


class TestAdd:
    def test_add_sorts_alphabetically(self, registry):
        for name in ("Work", "Admin", "Learning"):
            assert registry.add(name)
        assert registry.names() == ["Admin", "Learning", "Work"]

    def test_add_creates_style_record(self, registry):
        registry.add("Work")
        assert registry.styles() == {"Work": FolderStyle(name="Work")}

    @pytest.mark.parametrize("name", ["", "  "])
    def test_blank_name_refused(self, registry, name):
        assert not registry.add(name)
        assert registry.names() == []

    def test_duplicate_refused(self, registry):
        registry.add("Work")
        assert not registry.add("Work")
        assert registry.names() == ["Work"]
        assert len(registry.styles()) == 1

    def test_first_folder_becomes_selected(self, registry):
        registry.add("Work")
        registry.add("Admin")
        assert registry.selected == "Work"


class TestRemove:
    def test_remove_drops_name_and_style(self, registry):
        registry.add("Work")
        registry.add("Home")
        assert registry.remove("Work")
        assert registry.names() == ["Home"]
        assert "Work" not in registry.styles()
        assert not registry.remove("Work")

    def test_selection_falls_back_to_first_folder(self, registry):
        for name in ("B", "C", "A"):
            registry.add(name)
        registry.select("C")
        registry.remove("C")
        assert registry.selected == "A"

    def test_selection_cleared_when_last_folder_removed(self, registry):
        registry.add("Work")
        registry.remove("Work")
        assert registry.selected is None

    def test_clear_removes_everything(self, registry):
        registry.add("Work")
        registry.add("Home")
        assert registry.clear() == ["Home", "Work"]
        assert registry.names() == []
        assert registry.styles() == {}
        assert registry.selected is None


class TestReorder:
    def test_reorder_moves_folder(self, registry):
        for name in ("A", "B", "C"):
            registry.add(name)
        assert registry.reorder("C", 0)
        assert registry.names() == ["C", "A", "B"]

    def test_reorder_index_is_clamped(self, registry):
        for name in ("A", "B", "C"):
            registry.add(name)
        registry.reorder("A", 99)
        assert registry.names() == ["B", "C", "A"]
        registry.reorder("A", -5)
        assert registry.names() == ["A", "B", "C"]

    def test_reorder_unknown_folder(self, registry):
        assert not registry.reorder("Nope", 0)

    def test_add_after_reorder_restores_alphabetical_order(self, registry):
        registry.add("A")
        registry.add("B")
        registry.reorder("B", 0)
        assert registry.names() == ["B", "A"]
        registry.add("C")
        assert registry.names() == ["A", "B", "C"]


class TestLookupAndLoad:
    def test_lookup_outcomes(self, registry):
        registry.add("Work")
        assert registry.lookup(None) == FolderLookup.UNCATEGORIZED
        assert registry.lookup("Work") == FolderLookup.FOUND
        assert registry.lookup("Gone") == FolderLookup.ORPHANED

    def test_select_requires_registered_folder(self, registry):
        registry.add("Work")
        assert not registry.select("Gone")
        assert registry.selected == "Work"
        assert registry.select(None)
        assert registry.selected is None

    def test_load_keeps_order_and_dedupes(self, registry):
        registry.load(["B", "A", "B", ""], {"A": FolderStyle(name="A"), "Zombie": FolderStyle(name="Zombie")})
        assert registry.names() == ["B", "A"]
        assert set(registry.styles()) == {"A", "B"}
        assert registry.selected == "B"
