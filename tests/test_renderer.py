"""Tests for render_seo_markdown and its round trip through the parser."""

from llm_seo.models.page import Cta, Faq, Link, PageContent, Pricing, Section, Step, Trust, TrustItem
from llm_seo.services.parser import parse_markdown_content
from llm_seo.services.renderer import render_seo_markdown


def _content(**overrides) -> PageContent:
    data = dict(
        path="/guides/testing",
        title="Guide to Testing",
        description="Everything about testing: units, mocks and fixtures.",
        steps=[Step(title="Write", description="Add a test."), Step(title="Run", description="Call pytest.")],
        feature_list=["Fast", "Isolated"],
        pricing=Pricing(headline="Free", detail="Always."),
        trust=Trust(title="Trust", items=[TrustItem(title="Private", description="Nothing leaves.")]),
        sections=[Section(heading="Background", markdown="Some *history*.")],
        faqs=[Faq(question="Is it hard?", answer="No.")],
        resource_links=[Link(label="Docs", href="/docs")],
        related_links=[Link(label="Mocks", href="/guides/mocks")],
        cta=Cta(label="Start", href="/start", note="Try it today."),
        tags=["testing", "python"],
    )
    data.update(overrides)
    return PageContent(**data)


class TestRenderSeoMarkdown:
    def test_front_matter_order(self):
        markdown = render_seo_markdown(_content(nav=True, nav_order=2, schema_type="article"))
        front_matter = markdown.split("---\n")[1].splitlines()
        keys = [line.split(":")[0] for line in front_matter if not line.startswith("  - ")]
        assert keys == [
            "title",
            "description",
            "group",
            "indexable",
            "nav",
            "nav-order",
            "schema",
            "tags",
            "path",
        ]

    def test_values_with_colons_are_quoted(self):
        markdown = render_seo_markdown(_content())
        assert 'description: "Everything about testing: units, mocks and fixtures."' in markdown

    def test_body_blocks(self):
        markdown = render_seo_markdown(_content())
        assert "# Guide to Testing\n\nEverything about testing" in markdown
        assert "## How it works\n1. **Write** - Add a test.\n2. **Run** - Call pytest.\n" in markdown
        assert "## Feature list\n- Fast\n- Isolated\n" in markdown
        assert "## Pricing\nFree\n\nAlways.\n" in markdown
        assert "## Trust\n- **Private** - Nothing leaves.\n" in markdown
        assert "## Background\nSome *history*.\n" in markdown
        assert "## FAQs\n- **Is it hard?** No.\n" in markdown
        assert "## Resources\n- [Docs](/docs)\n" in markdown
        assert "## Related\n- [Mocks](/guides/mocks)\n" in markdown
        assert markdown.endswith("## Ready to send it?\nTry it today.\n\n[Start](/start)\n")

    def test_block_order(self):
        markdown = render_seo_markdown(_content())
        headings = [line for line in markdown.splitlines() if line.startswith("## ")]
        assert headings == [
            "## How it works",
            "## Feature list",
            "## Pricing",
            "## Trust",
            "## Background",
            "## FAQs",
            "## Resources",
            "## Related",
            "## Ready to send it?",
        ]

    def test_empty_blocks_are_omitted(self):
        markdown = render_seo_markdown(PageContent(path="/", title="Home"))
        assert markdown == "---\ntitle: Home\ngroup: content\nindexable: true\npath: /\n---\n# Home\n"

    def test_trust_without_items_is_omitted(self):
        markdown = render_seo_markdown(_content(trust=Trust(title="Trust")))
        assert "## Trust" not in markdown

    def test_round_trip(self):
        original = _content()
        parsed = parse_markdown_content(render_seo_markdown(original))
        assert parsed.title == original.title
        assert parsed.description == original.description
        assert parsed.steps == original.steps
        assert parsed.feature_list == original.feature_list
        assert parsed.pricing == original.pricing
        assert parsed.trust == original.trust
        assert parsed.faqs == original.faqs
        assert parsed.cta == original.cta
        assert parsed.extra_sections == original.sections
        assert parsed.resource_links == original.resource_links
        assert parsed.related_links == original.related_links
        assert parsed.meta["path"] == "/guides/testing"
        assert parsed.meta["tags"] == ["testing", "python"]

    def test_round_trip_without_descriptions(self):
        original = _content(
            steps=[Step(title="Upload"), Step(title="Send", description="We mail it.")],
            trust=Trust(title="Trust", items=[TrustItem(title="Encrypted")]),
        )
        markdown = render_seo_markdown(original)
        assert "1. **Upload**\n" in markdown
        assert "- **Encrypted**\n" in markdown
        parsed = parse_markdown_content(markdown)
        assert parsed.steps == original.steps
        assert parsed.trust == original.trust
