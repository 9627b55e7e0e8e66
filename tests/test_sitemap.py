from llm_seo.models.route import SeoRoute
from llm_seo.services.robots import build_robots_txt
from llm_seo.services.sitemap import (
    MAX_URLS_PER_SITEMAP,
    build_sitemap_entries,
    build_sitemap_md,
    chunk,
    normalize_lastmod,
    write_sitemap_files,
)

BASE_URL = "https://example.com"


def _routes(count):
    return [SeoRoute(path=f"/page-{number}", label=f"Page {number}") for number in range(count)]


class TestNormalizeLastmod:
    def test_date_only_is_midnight_utc(self):
        assert normalize_lastmod("2024-03-01") == "2024-03-01T00:00:00.000Z"

    def test_offset_is_converted_to_utc(self):
        assert normalize_lastmod("2024-03-01T10:30:00+02:00") == "2024-03-01T08:30:00.000Z"

    def test_milliseconds_are_kept(self):
        assert normalize_lastmod("2024-03-01T10:30:00.123456Z") == "2024-03-01T10:30:00.123Z"

    def test_invalid_values(self):
        assert normalize_lastmod("not a date") is None
        assert normalize_lastmod("") is None
        assert normalize_lastmod(None) is None


class TestSitemapEntries:
    def test_home_and_content_entries(self):
        routes = [
            SeoRoute(path="/", label="Home"),
            SeoRoute(path="/docs", label="Docs", published_at="2024-01-01", updated_at="2024-02-01"),
            SeoRoute(path="/bad", label="Bad", updated_at="yesterday"),
        ]
        home, docs, bad = build_sitemap_entries(BASE_URL, routes)
        assert "<loc>https://example.com/</loc>" in home
        assert "<changefreq>daily</changefreq>" in home
        assert "<priority>1.0</priority>" in home
        assert "<lastmod>" not in home
        assert "<lastmod>2024-02-01T00:00:00.000Z</lastmod>" in docs
        assert "<changefreq>weekly</changefreq>" in docs
        assert "<priority>0.7</priority>" in docs
        assert "<lastmod>" not in bad

    def test_locations_are_escaped(self):
        [entry] = build_sitemap_entries(BASE_URL, [SeoRoute(path="/a&b", label="A")])
        assert "<loc>https://example.com/a&amp;b</loc>" in entry

    def test_chunk(self):
        assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
        assert chunk([], 2) == []


class TestWriteSitemapFiles:
    def test_small_site_writes_single_file(self, tmp_path):
        written = write_sitemap_files(tmp_path, BASE_URL, _routes(10))
        assert written == [tmp_path / "sitemap.xml"]
        xml = (tmp_path / "sitemap.xml").read_text(encoding="utf-8")
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<urlset')
        assert xml.count("<url>") == 10
        assert not (tmp_path / "sitemap-1.xml").exists()

    def test_empty_site_writes_empty_urlset(self, tmp_path):
        write_sitemap_files(tmp_path, BASE_URL, [])
        xml = (tmp_path / "sitemap.xml").read_text(encoding="utf-8")
        assert "<urlset" in xml
        assert "<url>" not in xml

    def test_large_site_is_chunked_behind_index(self, tmp_path):
        routes = _routes(2 * MAX_URLS_PER_SITEMAP + 1)
        written = write_sitemap_files(tmp_path, BASE_URL, routes)
        assert [path.name for path in written] == [
            "sitemap-1.xml",
            "sitemap-2.xml",
            "sitemap-3.xml",
            "sitemap.xml",
        ]
        index = (tmp_path / "sitemap.xml").read_text(encoding="utf-8")
        assert "<sitemapindex" in index
        for number in (1, 2, 3):
            assert f"<loc>https://example.com/sitemap-{number}.xml</loc>" in index
        assert (tmp_path / "sitemap-1.xml").read_text(encoding="utf-8").count("<url>") == MAX_URLS_PER_SITEMAP
        assert (tmp_path / "sitemap-3.xml").read_text(encoding="utf-8").count("<url>") == 1


class TestSitemapMd:
    def test_lists_pages(self):
        text = build_sitemap_md(BASE_URL, [SeoRoute(path="/", label="Home"), SeoRoute(path="/docs", label="Docs")])
        assert text.startswith("# Sitemap\n")
        assert "## Pages\n- https://example.com/\n- https://example.com/docs\n" in text

    def test_large_site_gets_summary(self):
        text = build_sitemap_md(BASE_URL, _routes(5001))
        assert "Total pages: 5001" in text
        assert "Sitemap index: https://example.com/sitemap.xml" in text
        assert "## Pages" not in text


class TestRobots:
    def test_default_disallow(self):
        assert build_robots_txt(BASE_URL) == (
            "User-agent: *\n"
            "Allow: /\n"
            "Disallow: /admin\n"
            "Disallow: /admin/\n"
            "Sitemap: https://example.com/sitemap.xml\n"
        )

    def test_custom_disallow(self):
        text = build_robots_txt(BASE_URL, ["/private"])
        assert "Disallow: /private\n" in text
        assert "/admin" not in text

    def test_empty_disallow(self):
        assert "Disallow" not in build_robots_txt(BASE_URL, [])
