"""Tests for the fuzzy template picker."""

from __future__ import annotations

import importlib
import io
from typing import Iterable

import pytest
from rich.console import Console

from gitignore_downloader.cli.ui import choose_template, fuzzy_filter, fuzzy_score
from gitignore_downloader.errors import SelectionError

ui_module = importlib.import_module("gitignore_downloader.cli.ui")

OPTIONS = ["Go", "Node", "Python", "Rust", "VisualStudio"]


def _feed_keys(monkeypatch: pytest.MonkeyPatch, keys: Iterable[str]) -> None:
    remaining = iter(keys)

    def fake_get_key() -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise AssertionError("picker asked for more keys than scripted")

    monkeypatch.setattr(ui_module, "get_key", fake_get_key)


def _quiet_console() -> Console:
    return Console(file=io.StringIO(), width=100)


class TestFuzzy:
    def test_empty_query_keeps_everything_in_order(self):
        assert fuzzy_filter(OPTIONS, "") == OPTIONS

    def test_subsequence_match_is_case_insensitive(self):
        assert fuzzy_filter(OPTIONS, "vs") == ["VisualStudio"]
        assert fuzzy_filter(OPTIONS, "RST") == ["Rust"]

    def test_no_match(self):
        assert fuzzy_score("Rust", "xyz") is None
        assert fuzzy_filter(OPTIONS, "xyz") == []

    def test_prefix_ranks_above_scattered_match(self):
        assert fuzzy_filter(["Kotlin", "Go", "Godot"], "go") == ["Go", "Godot"]
        assert fuzzy_filter(["Node", "Android"], "no")[0] == "Node"


class TestChooseTemplate:
    def test_enter_selects_first_by_default(self, monkeypatch):
        _feed_keys(monkeypatch, ["enter"])
        assert choose_template(OPTIONS, console=_quiet_console()) == "Go"

    def test_arrow_navigation_wraps(self, monkeypatch):
        _feed_keys(monkeypatch, ["up", "enter"])
        assert choose_template(OPTIONS, console=_quiet_console()) == "VisualStudio"

    def test_typing_filters(self, monkeypatch):
        _feed_keys(monkeypatch, ["p", "y", "enter"])
        assert choose_template(OPTIONS, console=_quiet_console()) == "Python"

    def test_backspace_widens_filter(self, monkeypatch):
        _feed_keys(monkeypatch, ["r", "u", "backspace", "backspace", "down", "enter"])
        assert choose_template(OPTIONS, console=_quiet_console()) == "Node"

    def test_enter_without_matches_waits(self, monkeypatch):
        _feed_keys(monkeypatch, ["z", "enter", "backspace", "enter"])
        assert choose_template(OPTIONS, console=_quiet_console()) == "Go"

    def test_escape_cancels(self, monkeypatch):
        _feed_keys(monkeypatch, ["escape"])
        with pytest.raises(SelectionError, match="cancelled"):
            choose_template(OPTIONS, console=_quiet_console())

    def test_ctrl_c_cancels(self, monkeypatch):
        def interrupt() -> str:
            raise KeyboardInterrupt

        monkeypatch.setattr(ui_module, "get_key", interrupt)
        with pytest.raises(SelectionError):
            choose_template(OPTIONS, console=_quiet_console())

    def test_empty_options(self):
        with pytest.raises(SelectionError):
            choose_template([], console=_quiet_console())
