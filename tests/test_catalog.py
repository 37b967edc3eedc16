"""
Tests for the catalog index — short-name and download maps.
"""

from src.core.models.extension import ExtensionInfo
from src.core.services.catalog import CatalogIndex, build_download_map, build_short_name_map

from tests.helpers import make_info


class TestShortNameMap:
    def test_groups_keys_in_first_seen_order(self, catalog):
        short_map = build_short_name_map(catalog)
        assert short_map["foobar"] == ["org.example.foobar"]
        assert short_map["widget"] == ["a.b.widget", "c.d.widget"]

    def test_entries_without_short_name_are_left_out(self, catalog):
        short_map = build_short_name_map(catalog)
        keys = [k for keys in short_map.values() for k in keys]
        assert "org.example.noshort" not in keys

    def test_empty_short_name_is_ignored(self):
        short_map = build_short_name_map([ExtensionInfo(key="x.y.z", short_name="")])
        assert short_map == {}

    def test_repeated_key_listed_once(self):
        infos = [make_info("a.b.foo", "foo"), make_info("a.b.foo", "foo")]
        assert build_short_name_map(infos) == {"foo": ["a.b.foo"]}


class TestDownloadMap:
    def test_only_downloadable_entries(self, catalog):
        urls = build_download_map(catalog)
        assert urls["org.example.foobar"] == "https://example.org/files/org.example.foobar.zip"
        assert "org.example.unpublished" not in urls


class TestCatalogIndex:
    def test_loader_is_lazy_and_called_once(self, catalog):
        calls = []

        def loader():
            calls.append(1)
            return catalog

        index = CatalogIndex(loader)
        assert not index.loaded
        assert calls == []

        index.keys_for("foobar")
        index.download_url("org.example.foobar")
        index.keys_for("widget")
        assert index.loaded
        assert calls == [1]

    def test_accepts_plain_sequence(self, catalog):
        index = CatalogIndex(catalog)
        assert index.loaded
        assert len(index.infos) == len(catalog)

    def test_keys_for_unknown(self, catalog):
        assert CatalogIndex(catalog).keys_for("nope") == []

    def test_keys_for_returns_copy(self, catalog):
        index = CatalogIndex(catalog)
        index.keys_for("widget").append("mutated")
        assert index.keys_for("widget") == ["a.b.widget", "c.d.widget"]
