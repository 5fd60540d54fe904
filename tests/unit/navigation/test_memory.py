"""Tests for the in-memory navigation port."""

from __future__ import annotations

from facetsync.navigation.memory import InMemoryNavigation


class TestInMemoryNavigation:
    def test_normalizes_leading_hash(self) -> None:
        navigation = InMemoryNavigation("q=cats")
        assert navigation.read_fragment() == "#q=cats"
        navigation.write_fragment("##start=0")
        assert navigation.read_fragment() == "#start=0"

    def test_empty_fragment(self) -> None:
        assert InMemoryNavigation().read_fragment() == ""
        assert InMemoryNavigation("#").read_fragment() == ""

    def test_write_pushes_history(self) -> None:
        navigation = InMemoryNavigation()
        navigation.write_fragment("#a")
        navigation.write_fragment("#b")
        assert navigation.history == ["", "#a", "#b"]
        assert navigation.index == 2

    def test_same_fragment_not_pushed(self) -> None:
        navigation = InMemoryNavigation("#a")
        navigation.write_fragment("#a")
        assert navigation.history == ["#a"]

    def test_back_and_forward(self) -> None:
        navigation = InMemoryNavigation("#a")
        navigation.navigate("#b")
        navigation.back()
        assert navigation.read_fragment() == "#a"
        navigation.forward()
        assert navigation.read_fragment() == "#b"
        navigation.forward()
        assert navigation.read_fragment() == "#b"

    def test_write_truncates_forward_entries(self) -> None:
        navigation = InMemoryNavigation("#a")
        navigation.navigate("#b")
        navigation.back()
        navigation.write_fragment("#c")
        assert navigation.history == ["#a", "#c"]

    def test_go_back_at_first_entry(self) -> None:
        navigation = InMemoryNavigation("#a")
        navigation.go_back()
        assert navigation.read_fragment() == "#a"
        assert navigation.index == 0
