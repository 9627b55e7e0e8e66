"""End-to-end generation over a small content tree."""

import asyncio
import json
from pathlib import Path

from llm_seo.models.generation import GenerationFailure
from llm_seo.models.page import MarketingContent, PageContent
from llm_seo.services.generator import (
    build_article_links,
    generate_seo_artifacts,
    select_public_markdown_targets,
    try_generate_seo_artifacts,
)
from tests.helpers import write, write_json_file


def _content_tree(root):
    write(root, "content/marketing/pricing.md", "[meta]\ngroup: company\n\n# Pricing\n\nPlans for every team.\n")
    write(root, "content/marketing/hidden.md", "[meta]\nindexable: no\n\n# Hidden\n\nNot listed.\n")
    write(root, "content/pages/docs/index.md", "---\ntitle: Docs\n---\n# Docs\n\nHow to use it.\n")
    write_json_file(
        root,
        "content/seo/templates/guides.json",
        {"id": "guides", "route": "/guides/{slug}", "content": {"title": "Guide to {{topic}}"}},
    )
    write_json_file(root, "content/seo/datasets/guides.json", [{"slug": "testing", "topic": "Testing"}])


def _config(make_config, **overrides):
    return make_config(routes={"staticRoutes": [{"path": "/", "label": "Home"}]}, siteName="Acme", **overrides)


class TestGenerateSeoArtifacts:
    def test_writes_every_artifact(self, tmp_path, make_config):
        _content_tree(tmp_path)
        result = asyncio.run(generate_seo_artifacts(_config(make_config)))

        public = tmp_path / "public"
        assert result.sitemap_path == str(public / "sitemap.xml")
        assert result.sitemap_files == [str(public / "sitemap.xml")]
        assert [route.path for route in result.routes] == ["/", "/hidden", "/pricing", "/guides/testing"]
        assert result.programmatic_markdown_count == 1
        assert result.markdown_output_count == 2

        sitemap = (public / "sitemap.xml").read_text(encoding="utf-8")
        assert sitemap.count("<url>") == 3
        assert "https://example.com/hidden" not in sitemap
        assert "<loc>https://example.com/guides/testing</loc>" in sitemap

        assert "Sitemap: https://example.com/sitemap.xml" in (public / "robots.txt").read_text(encoding="utf-8")
        assert "- https://example.com/pricing\n" in (public / "sitemap.md").read_text(encoding="utf-8")

        llms = (public / "llms.txt").read_text(encoding="utf-8")
        assert llms.startswith("# Acme\n")
        assert (
            "## Articles\n"
            "- [Docs](https://example.com/docs.md)\n"
            "- [Guide to Testing](https://example.com/guides/testing.md)\n"
            "- [Pricing](https://example.com/pricing.md)\n"
        ) in llms
        assert "Hidden" not in llms

        assert (public / "pricing.md").read_text(encoding="utf-8").startswith("---\ntitle: Pricing\n")
        assert (public / "docs.md").exists()
        assert not (public / "hidden.md").exists()
        assert not (public / "guides" / "testing.md").exists()
        assert (tmp_path / "content/seo/generated/guides/testing.md").exists()

    def test_writes_content_caches(self, tmp_path, make_config):
        _content_tree(tmp_path)
        result = asyncio.run(generate_seo_artifacts(_config(make_config)))

        routes = json.loads(Path(result.marketing_routes_path).read_text(encoding="utf-8"))
        assert [route["path"] for route in routes] == ["/hidden", "/pricing"]
        assert "sourceFile" not in routes[0]

        content = json.loads(Path(result.marketing_content_path).read_text(encoding="utf-8"))
        assert "markdown" not in content[0]

        seo_content = json.loads(Path(result.seo_content_path).read_text(encoding="utf-8"))
        assert [entry["path"] for entry in seo_content] == ["/docs", "/guides/testing"]
        assert Path(result.seo_content_path) == tmp_path / "config" / "seo_content.json"

    def test_reports_programmatic_issues(self, tmp_path, make_config):
        _content_tree(tmp_path)
        result = asyncio.run(generate_seo_artifacts(_config(make_config)))
        messages = [issue.message for issue in result.programmatic_issues]
        assert "Missing description for /guides/testing" in messages

    def test_is_repeatable(self, tmp_path, make_config):
        _content_tree(tmp_path)
        config = _config(make_config)
        asyncio.run(generate_seo_artifacts(config))
        first = {
            name: (tmp_path / "public" / name).read_text(encoding="utf-8")
            for name in ("sitemap.xml", "llms.txt", "sitemap.md", "robots.txt")
        }
        asyncio.run(generate_seo_artifacts(config))
        for name, text in first.items():
            assert (tmp_path / "public" / name).read_text(encoding="utf-8") == text

    def test_public_markdown_can_be_disabled(self, tmp_path, make_config):
        _content_tree(tmp_path)
        config = _config(make_config, generation={"generatePublicMarkdown": False})
        result = asyncio.run(generate_seo_artifacts(config))
        assert result.markdown_output_count == 0
        assert not (tmp_path / "public" / "pricing.md").exists()

    def test_programmatic_markdown_copies_on_request(self, tmp_path, make_config):
        _content_tree(tmp_path)
        config = _config(make_config, generation={"publicMarkdownFromProgrammatic": True})
        result = asyncio.run(generate_seo_artifacts(config))
        assert result.markdown_output_count == 3
        assert (tmp_path / "public" / "guides" / "testing.md").exists()

    def test_duplicate_marketing_path_is_returned(self, tmp_path, make_config):
        write(tmp_path, "content/marketing/pricing.md", "# Pricing")
        write(tmp_path, "content/marketing/pricing/index.md", "# Pricing again")
        outcome = asyncio.run(try_generate_seo_artifacts(_config(make_config)))
        assert isinstance(outcome, GenerationFailure)
        assert outcome.kind == "duplicate-route"
        assert outcome.path == "/pricing"
        assert not (tmp_path / "public" / "sitemap.xml").exists()


class TestArticleLinks:
    def test_filters_and_sorts(self, make_config):
        entries = [
            PageContent(path="/zeta", title="zeta"),
            PageContent(path="/alpha", title="Alpha"),
            PageContent(path="/quiet", title="Quiet", llms=False),
            PageContent(path="/closed", title="Closed", indexable=False),
        ]
        links = build_article_links(make_config(), "https://example.com", entries)
        assert [(link.label, link.href) for link in links] == [
            ("Alpha", "https://example.com/alpha.md"),
            ("zeta", "https://example.com/zeta.md"),
        ]

    def test_include_predicate(self, make_config):
        config = make_config()
        config.llms.include = lambda entry: entry.path.startswith("/docs")
        entries = [PageContent(path="/docs/a", title="A"), PageContent(path="/b", title="B")]
        assert [link.label for link in build_article_links(config, "https://example.com", entries)] == ["A"]


class TestPublicMarkdownTargets:
    def test_marketing_wins_and_blank_bodies_are_skipped(self, make_config):
        marketing = [
            MarketingContent(path="/pricing", title="Pricing", label="Pricing", source_file="p.md", markdown="# P"),
            MarketingContent(path="/empty", title="Empty", label="Empty", source_file="e.md", markdown="  "),
        ]
        static = [PageContent(path="/pricing", title="Static pricing"), PageContent(path="/docs", title="Docs")]
        programmatic = [PageContent(path="/guides/a", title="A")]
        targets = select_public_markdown_targets(make_config(), marketing, static, programmatic)
        assert [(target.path, target.title) for target in targets] == [("/pricing", "Pricing"), ("/docs", "Docs")]
