"""
Tests for the HTML parsing helpers and the robots / sitemap parsers
"""
from conftest import build_page

from crawler import parser
from crawler.robots import parse_robots
from crawler.sitemap import candidate_urls, parse_sitemap


class TestParser:
    def test_meta_content_by_name_and_property(self):
        soup = parser.make_soup(build_page(
            '<meta name="description" content="Plumbing">'
            '<meta property="og:title" content="Acme">'
            '<meta name="keywords" content="">'
        ))
        assert parser.meta_content(soup, name="description") == "Plumbing"
        assert parser.meta_content(soup, prop="og:title") == "Acme"
        assert parser.meta_content(soup, name="keywords") is None
        assert parser.meta_content(soup, name="author") is None

    def test_link_href(self):
        soup = parser.make_soup(build_page('<link rel="canonical" href="https://acme.test/">'))
        assert parser.link_href(soup, "canonical") == "https://acme.test/"
        assert parser.link_href(soup, "icon") is None

    def test_body_text_drops_scripts(self):
        html = build_page(body="<p>Hello</p><script>var x = 1;</script><style>p{}</style>")
        assert parser.collapse_ws(parser.body_text(html)) == "Hello"

    def test_absolute_and_hostname(self):
        assert parser.absolute("/about", "https://acme.test/a/b") == "https://acme.test/about"
        assert parser.hostname("https://www.acme.test:8080/x") == "www.acme.test"
        assert parser.hostname("not a url") == ""

    def test_site_label(self):
        assert parser.site_label("https://www.acme.co.uk/contact") == "acme"
        assert parser.site_label("") is None

    def test_json_ld_blocks_reports_invalid(self):
        soup = parser.make_soup(build_page(
            '<script type="application/ld+json">{"@type": "Organization"}</script>'
            '<script type="application/ld+json">{not json</script>'
            '<script type="application/ld+json">   </script>'
        ))
        blocks = list(parser.json_ld_blocks(soup))
        assert blocks == [({"@type": "Organization"}, True), (None, False)]

    def test_json_ld_objects_flattens_lists(self):
        soup = parser.make_soup(build_page(
            '<script type="application/ld+json">[{"@type": "A"}, {"@type": "B"}, 3]</script>'
        ))
        assert [o["@type"] for o in parser.json_ld_objects(soup)] == ["A", "B"]


class TestRobots:
    def test_sitemaps_and_indexing(self):
        info = parse_robots(
            "User-agent: *\nDisallow: /admin\nSitemap: https://acme.test/sitemap.xml\n"
        )
        assert info.exists is True
        assert info.allows_indexing is True
        assert info.sitemap_urls == ["https://acme.test/sitemap.xml"]
        assert info.issues == []

    def test_disallow_all(self):
        info = parse_robots("User-agent: *\nDisallow: /\n")
        assert info.allows_indexing is False
        assert info.issues == ["Site blocks all crawlers"]


class TestSitemap:
    def test_candidates_are_origin_relative(self):
        assert candidate_urls("https://acme.test/shop/item?id=3") == [
            "https://acme.test/sitemap.xml",
            "https://acme.test/sitemap_index.xml",
            "https://acme.test/sitemap/sitemap.xml",
        ]

    def test_urlset(self):
        xml = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            "<url><loc>https://acme.test/</loc><lastmod>2024-01-05</lastmod></url>"
            "<url><loc>https://acme.test/about</loc><lastmod>2024-03-01</lastmod></url>"
            "</urlset>"
        )
        assert parse_sitemap(xml) == (2, "2024-03-01")

    def test_broken_xml_counts_loc_tags(self):
        assert parse_sitemap("<urlset><loc>a</loc><loc>b</loc>") == (2, None)
