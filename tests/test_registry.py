"""Tests for the static/generated content registry and the content cache."""

import json

from llm_seo.services.content_cache import ContentCache
from llm_seo.services.files import dump_models, scan_markdown_files, write_json
from llm_seo.services.registry import (
    build_seo_content_index_from_filesystem,
    build_seo_static_content_index_from_filesystem,
    read_seo_content_cache,
)
from tests.helpers import write


class TestScan:
    def test_skips_private_and_readme(self, tmp_path):
        write(tmp_path, "pages/a.md", "# A")
        write(tmp_path, "pages/README.md", "# Readme")
        write(tmp_path, "pages/_drafts/b.md", "# B")
        write(tmp_path, "pages/.hidden/c.md", "# C")
        write(tmp_path, "pages/notes.txt", "text")
        write(tmp_path, "pages/docs/index.md", "# Docs")
        assert scan_markdown_files(tmp_path / "pages") == ["a.md", "docs/index.md"]

    def test_missing_directory(self, tmp_path):
        assert scan_markdown_files(tmp_path / "nope") == []


class TestBuildIndex:
    def test_record_fields(self, tmp_path, make_config):
        write(
            tmp_path,
            "content/pages/features/Bulk_Upload.md",
            "---\ngroup: resources\nnav-order: 3\nindexable: no\nschema: software\ntags: a, b\n---\n"
            "# Bulk upload\n\nSend many files at once.\n",
        )
        [record] = build_seo_static_content_index_from_filesystem(make_config())
        assert record.path == "/features/bulk-upload"
        assert record.group == "resources"
        assert record.nav_order == 3
        assert record.indexable is False
        assert record.schema_type == "software"
        assert record.tags == ["a", "b"]
        assert record.markdown_path == "/features/bulk-upload.md"
        assert record.heading == "Bulk upload"
        assert record.description == "Send many files at once."
        assert [crumb.name for crumb in record.breadcrumbs] == ["Home", "Features", "Bulk Upload"]

    def test_path_override_and_label_fallback(self, tmp_path, make_config):
        write(tmp_path, "content/pages/x.md", "---\npath: /custom/place\n---\nNo heading here.\n")
        [record] = build_seo_static_content_index_from_filesystem(make_config())
        assert record.path == "/custom/place"
        assert record.title == "Place"
        assert record.heading == "Place"

    def test_marketing_prefix_is_skipped(self, tmp_path, make_config):
        write(tmp_path, "content/pages/marketing/promo.md", "# Promo")
        write(tmp_path, "content/pages/about.md", "# About")
        records = build_seo_static_content_index_from_filesystem(make_config())
        assert [record.path for record in records] == ["/about"]

    def test_generated_pages_follow_static_pages(self, tmp_path, make_config):
        write(tmp_path, "content/pages/about.md", "# About")
        write(tmp_path, "content/seo/generated/guides/testing.md", "---\ntitle: Testing\n---\n# Testing")
        records = build_seo_content_index_from_filesystem(make_config())
        assert [record.path for record in records] == ["/about", "/guides/testing"]

    def test_rebuild_is_byte_identical(self, tmp_path, make_config):
        write(tmp_path, "content/pages/index.md", "# Home\n\nWelcome.\n\n## FAQ\n- **Why?** Because.\n")
        write(tmp_path, "content/pages/about.md", "---\ntags:\n  - x\n---\n# About\n")
        config = make_config()
        first = write_json(tmp_path / "one.json", dump_models(build_seo_content_index_from_filesystem(config)))
        second = write_json(tmp_path / "two.json", dump_models(build_seo_content_index_from_filesystem(config)))
        assert first.read_bytes() == second.read_bytes()


class TestContentCache:
    def test_cache_file_is_read_in_production(self, tmp_path, make_config):
        write(tmp_path, "content/pages/about.md", "# About")
        cached = [{"path": "/cached", "title": "Cached", "markdownPath": "/cached.md"}]
        write(tmp_path, "config/seo_content.json", json.dumps(cached))
        cache = ContentCache(make_config(production=True))
        assert [entry.path for entry in cache.seo_content()] == ["/cached"]

    def test_corrupt_cache_falls_back_to_filesystem(self, tmp_path, make_config):
        write(tmp_path, "content/pages/about.md", "# About")
        write(tmp_path, "config/seo_content.json", "{not json")
        config = make_config(production=True)
        assert read_seo_content_cache(config) is None
        assert [entry.path for entry in ContentCache(config).seo_content()] == ["/about"]

    def test_filesystem_is_used_outside_production(self, tmp_path, make_config):
        write(tmp_path, "content/pages/about.md", "# About")
        write(tmp_path, "config/seo_content.json", json.dumps([{"path": "/cached", "title": "C"}]))
        cache = ContentCache(make_config(production=False))
        assert [entry.path for entry in cache.seo_content()] == ["/about"]

    def test_memoized_until_refresh(self, tmp_path, make_config):
        write(tmp_path, "content/pages/about.md", "# About")
        cache = ContentCache(make_config())
        assert len(cache.seo_content()) == 1
        write(tmp_path, "content/pages/team.md", "# Team")
        assert len(cache.seo_content()) == 1
        cache.refresh()
        assert len(cache.seo_content()) == 2

    def test_resolve_content_order(self, tmp_path, make_config):
        write(tmp_path, "content/marketing/pricing.md", "[meta]\ntitle: Marketing pricing\n\n# Pricing\n")
        write(tmp_path, "content/pages/pricing.md", "# Static pricing")
        write(tmp_path, "content/pages/about.md", "# About")
        cache = ContentCache(make_config())
        assert cache.resolve_content("/pricing").title == "Marketing pricing"
        assert cache.resolve_content("/about/").title == "About"
        assert cache.resolve_content("/missing") is None

    def test_is_indexable(self, tmp_path, make_config):
        write(tmp_path, "content/pages/about.md", "# About")
        write(tmp_path, "content/pages/hidden.md", "---\nindexable: false\n---\n# Hidden")
        write(tmp_path, "content/pages/team.md", "# Team")
        cache = ContentCache(make_config(routes={"noindexPaths": ["/team"]}))
        assert cache.is_indexable("/about") is True
        assert cache.is_indexable("/hidden") is False
        assert cache.is_indexable("/team") is False
        assert cache.is_indexable("/missing") is False
