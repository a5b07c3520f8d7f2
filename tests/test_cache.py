# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

from playshelf.cache import ResultCache


def test_values_persist(cache):
    cache.set("a", "1")
    cache.set_json("b", {"games": [1, 2]})

    reopened = ResultCache(cache.path)

    assert reopened.get("a") == "1"
    assert reopened.get_json("b") == {"games": [1, 2]}
    assert "a" in reopened
    assert "c" not in reopened


def test_remove_and_clear(cache):
    cache.set("a", "1")
    cache.set("b", "2")

    cache.remove("a")
    cache.remove("missing")

    assert cache.get("a") is None
    assert cache.get("b") == "2"

    cache.clear()

    assert cache.get("b") is None


def test_corrupt_file_is_ignored(cache):
    cache.path.parent.mkdir(parents=True)
    cache.path.write_text("{not json", "utf-8")

    assert cache.get("a") is None

    cache.set("a", "1")

    assert cache.get("a") == "1"


def test_invalid_json_value(cache):
    cache.set("a", "{")

    assert cache.get_json("a") is None


def test_no_temporary_files_are_left(cache):
    cache.set("a", "1")
    cache.set("b", "2")

    assert [path.name for path in cache.path.parent.iterdir()] == ["cache.json"]
