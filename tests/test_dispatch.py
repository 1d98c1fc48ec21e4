"""
Tests for query dispatch: URL construction, gating, and browser openers.

Tests URL escaping, placeholder substitution, and xdg-open usage.
"""

from unittest.mock import MagicMock, patch

import pytest

from multisearch.errors import ValidationError
from multisearch.search.dispatch import (
    WebbrowserOpener,
    XdgOpener,
    build_query_url,
    get_opener,
    open_all,
    quote_query,
)
from multisearch.search.engine import Engine


class TestQueryUrl:
    """Test escaping and substitution."""

    def test_space_becomes_percent_20(self):
        url = build_query_url("https://bing.com/search?q=%s", "hello world")
        assert url == "https://bing.com/search?q=hello%20world"

    def test_reserved_characters_escaped(self):
        assert quote_query("a&b=c/d?e#f") == "a%26b%3Dc%2Fd%3Fe%23f"

    def test_uri_component_safe_characters_kept(self):
        assert quote_query("a-b_c.d!e~f*g'h(i)") == "a-b_c.d!e~f*g'h(i)"

    def test_unicode_is_utf8_escaped(self):
        assert quote_query("café") == "caf%C3%A9"

    def test_every_placeholder_substituted(self):
        url = build_query_url("https://x.test/%s?q=%s", "cats")
        assert url == "https://x.test/cats?q=cats"


class TestDispatchQuery:
    """Test EngineStore.dispatch_query gating and ordering."""

    def test_opens_enabled_engines_in_order(self, store, opener):
        urls = store.dispatch_query("hello world")
        assert opener.opened == [
            "https://www.google.com/search?q=hello%20world",
            "https://bing.com/search?q=hello%20world",
        ]
        assert urls == opener.opened

    def test_disabled_engines_skipped(self, store, opener):
        store.toggle_enabled("1")
        store.dispatch_query("cats")
        assert opener.opened == ["https://bing.com/search?q=cats"]

    def test_no_enabled_engines_opens_nothing(self, store, opener):
        store.toggle_enabled("1")
        store.toggle_enabled("2")
        with pytest.raises(ValidationError):
            store.dispatch_query("cats")
        assert opener.opened == []

    def test_empty_collection_opens_nothing(self, store, opener):
        store.remove_many(["1", "2", "3"])
        with pytest.raises(ValidationError):
            store.dispatch_query("cats")
        assert opener.opened == []

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_rejected(self, store, opener, query):
        with pytest.raises(ValidationError):
            store.dispatch_query(query)
        assert opener.opened == []

    def test_query_is_not_trimmed_before_escaping(self, store, opener):
        store.dispatch_query(" cats")
        assert opener.opened[0].endswith("q=%20cats")


class TestOpenAll:
    """Test per-engine failure isolation."""

    def test_failing_opener_does_not_stop_dispatch(self):
        engines = [
            Engine(id="1", name="A", url="https://a.test/?q=%s"),
            Engine(id="2", name="B", url="https://b.test/?q=%s"),
        ]
        flaky = MagicMock()
        flaky.open.side_effect = [OSError("blocked"), None]

        urls = open_all(engines, "x", flaky)

        assert urls == ["https://a.test/?q=x", "https://b.test/?q=x"]
        assert flaky.open.call_count == 2


class TestOpeners:
    """Test the concrete browser openers."""

    def test_xdg_open_spawns_process(self):
        with patch("multisearch.search.dispatch.subprocess.Popen") as popen:
            XdgOpener().open("https://x.test/?q=a")
        args, kwargs = popen.call_args
        assert args[0] == ["xdg-open", "https://x.test/?q=a"]

    def test_xdg_open_missing_binary_does_not_raise(self):
        with patch("multisearch.search.dispatch.subprocess.Popen", side_effect=FileNotFoundError):
            XdgOpener().open("https://x.test/")

    def test_webbrowser_opens_new_tab(self):
        with patch("multisearch.search.dispatch.webbrowser.open_new_tab", return_value=True) as open_tab:
            WebbrowserOpener().open("https://x.test/")
        open_tab.assert_called_once_with("https://x.test/")

    def test_get_opener_by_name(self):
        assert isinstance(get_opener("webbrowser"), WebbrowserOpener)
        assert isinstance(get_opener("xdg-open"), XdgOpener)

    def test_get_opener_unknown_falls_back(self):
        assert isinstance(get_opener("netscape"), XdgOpener)
