"""Tests for front matter and [meta] block parsing."""

from llm_seo.services.metadata import parse_front_matter, parse_meta_block


class TestFrontMatter:
    def test_scalars_and_body(self):
        meta, body = parse_front_matter("---\nTitle: Hello\ngroup: company\n---\n# Heading\n")
        assert meta == {"title": "Hello", "group": "company"}
        assert body == "# Heading\n"

    def test_block_list(self):
        meta, _ = parse_front_matter("---\ntags:\n  - alpha\n  - beta\ntitle: T\n---\n")
        assert meta["tags"] == ["alpha", "beta"]
        assert meta["title"] == "T"

    def test_inline_list(self):
        meta, _ = parse_front_matter("---\ntags: [a, b , c]\n---\n")
        assert meta["tags"] == ["a", "b", "c"]

    def test_blank_line_ends_list(self):
        meta, _ = parse_front_matter("---\ntags:\n- a\n\n- b\n---\n")
        assert meta["tags"] == ["a"]

    def test_quoted_values_are_unquoted(self):
        meta, _ = parse_front_matter('---\ndescription: "Price: $5 \\"flat\\""\n---\n')
        assert meta["description"] == 'Price: $5 "flat"'

    def test_leading_blank_lines_are_skipped(self):
        meta, _ = parse_front_matter("\n\n---\ntitle: X\n---\nbody")
        assert meta == {"title": "X"}

    def test_missing_front_matter(self):
        markdown = "# Just a page\n"
        assert parse_front_matter(markdown) == ({}, markdown)


class TestMetaBlock:
    def test_reads_until_blank_line(self):
        meta, body = parse_meta_block("[meta]\nTitle: Hello\nseo-description: x\n\n# Page\nText")
        assert meta == {"title": "Hello", "seo-description": "x"}
        assert body == "# Page\nText"

    def test_marker_is_case_insensitive(self):
        meta, _ = parse_meta_block("[META]\ngroup: company\n")
        assert meta == {"group": "company"}

    def test_non_pair_line_starts_body(self):
        meta, body = parse_meta_block("[meta]\ntitle: A\n# Heading\n")
        assert meta == {"title": "A"}
        assert body == "# Heading\n"

    def test_missing_marker(self):
        markdown = "title: not meta\n"
        assert parse_meta_block(markdown) == ({}, markdown)
