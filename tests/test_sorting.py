import pytest

from webfs.services.models import DirectoryEntry
from webfs.services.sorting import (SortKey, SortSpec, compare_by_name,
                                    compare_by_size, compare_by_time,
                                    sort_entries)


def entry(name, is_dir=False, size=0, mod_time=0.0):
    return DirectoryEntry(name=name, is_dir=is_dir, size=size, mod_time=mod_time, mode="")


def names(entries):
    return [e.name for e in entries]


class TestComparators:
    @pytest.mark.parametrize("compare", [compare_by_name, compare_by_size, compare_by_time])
    def test_directory_before_file(self, compare):
        folder = entry("zzz", is_dir=True, size=0, mod_time=0)
        file = entry("aaa", size=999, mod_time=10_000)
        assert compare(folder, file) == -1
        assert compare(file, folder) == 1

    def test_name_is_case_insensitive(self):
        assert compare_by_name(entry("apple"), entry("Banana")) == -1
        assert compare_by_name(entry("README"), entry("readme")) == 0

    def test_size_orders_files_by_bytes(self):
        assert compare_by_size(entry("z", size=1), entry("a", size=2)) == -1
        assert compare_by_size(entry("z", size=5), entry("a", size=5)) == 0

    def test_size_orders_directories_by_name(self):
        big = entry("alpha", is_dir=True, size=8192)
        small = entry("Beta", is_dir=True, size=4096)
        assert compare_by_size(big, small) == -1

    def test_time_puts_newest_first(self):
        older = entry("a", mod_time=100)
        newer = entry("b", mod_time=200)
        assert compare_by_time(newer, older) == -1
        assert compare_by_time(older, newer) == 1
        assert compare_by_time(entry("x", is_dir=True, mod_time=1), entry("y", is_dir=True, mod_time=2)) == 1


class TestSortEntries:
    def test_name_ascending(self):
        entries = [entry("b.txt"), entry("A", is_dir=True), entry("a.txt"), entry("c", is_dir=True)]
        assert names(sort_entries(entries, SortSpec(SortKey.NAME, True))) == ["A", "c", "a.txt", "b.txt"]

    def test_name_descending_puts_files_first(self):
        entries = [entry("b.txt"), entry("A", is_dir=True), entry("a.txt"), entry("c", is_dir=True)]
        assert names(sort_entries(entries, SortSpec(SortKey.NAME, False))) == ["b.txt", "a.txt", "c", "A"]

    def test_size_groups_directories_then_files(self):
        entries = [
            entry("big", size=100),
            entry("z-dir", is_dir=True, size=1),
            entry("small", size=1),
            entry("a-dir", is_dir=True, size=9999),
        ]
        assert names(sort_entries(entries, SortSpec(SortKey.SIZE, True))) == ["a-dir", "z-dir", "small", "big"]

    def test_time_ascending_is_newest_first_within_type(self):
        entries = [
            entry("old-file", mod_time=1),
            entry("new-file", mod_time=3),
            entry("old-dir", is_dir=True, mod_time=2),
            entry("new-dir", is_dir=True, mod_time=4),
        ]
        assert names(sort_entries(entries, SortSpec(SortKey.TIME, True))) == [
            "new-dir", "old-dir", "new-file", "old-file",
        ]

    def test_default_sort_is_name_ascending(self):
        entries = [entry("b"), entry("a")]
        assert names(sort_entries(entries)) == ["a", "b"]

    def test_input_is_not_mutated(self):
        entries = [entry("b"), entry("a")]
        sort_entries(entries)
        assert names(entries) == ["b", "a"]

    @pytest.mark.parametrize("key", list(SortKey))
    def test_stable_for_equal_keys(self, key):
        # All four compare equal under every key.
        entries = [
            entry("Same", size=7, mod_time=50),
            entry("same", size=7, mod_time=50),
            entry("SAME", size=7, mod_time=50),
            entry("sAmE", size=7, mod_time=50),
        ]
        assert names(sort_entries(entries, SortSpec(key, True))) == ["Same", "same", "SAME", "sAmE"]

    @pytest.mark.parametrize("key", list(SortKey))
    def test_descending_reverses_full_stable_order(self, key):
        entries = [
            entry("dup", size=3, mod_time=10),
            entry("DUP", size=3, mod_time=10),
            entry("folder", is_dir=True, mod_time=10),
            entry("other", size=1, mod_time=20),
            entry("Folder", is_dir=True, mod_time=10),
        ]
        ascending = sort_entries(entries, SortSpec(key, True))
        descending = sort_entries(entries, SortSpec(key, False))
        assert names(descending) == list(reversed(names(ascending)))

    @pytest.mark.parametrize("key", [SortKey.NAME, SortKey.SIZE])
    @pytest.mark.parametrize("ascending", [True, False])
    def test_directories_stay_grouped(self, key, ascending):
        entries = [
            entry("m.txt", size=5),
            entry("b-dir", is_dir=True),
            entry("a.txt", size=50),
            entry("y-dir", is_dir=True),
        ]
        kinds = [e.is_dir for e in sort_entries(entries, SortSpec(key, ascending))]
        expected = [True, True, False, False] if ascending else [False, False, True, True]
        assert kinds == expected

    def test_accepts_sort_key_string(self):
        entries = [entry("big", size=9), entry("small", size=1)]
        assert names(sort_entries(entries, SortSpec("Size", True))) == ["small", "big"]
