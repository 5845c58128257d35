from sitecrawler.adapters.extractor import SoupLinkExtractor
from sitecrawler.utils.parsing import extract_links


def test_extract_links_resolves_relative_and_normalizes():
    html = """
    <html><body>
        <a href="/a">A</a>
        <a href="/a#frag">A again</a>
        <a href="b/">B</a>
        <a href="HTTPS://Other.test:443/x/">other</a>
    </body></html>
    """
    links = extract_links(html, "https://site.test/dir/page")
    assert links == {
        "https://site.test/a",
        "https://site.test/dir/b",
        "https://other.test/x",
    }


def test_extract_links_skips_non_http_and_empty_hrefs():
    html = """
    <a href="mailto:me@site.test">mail</a>
    <a href="javascript:void(0)">js</a>
    <a href="ftp://site.test/file">ftp</a>
    <a href="">empty</a>
    <a href="   ">blank</a>
    <a>no href</a>
    <a href="/ok">ok</a>
    """
    assert extract_links(html, "https://site.test/") == {"https://site.test/ok"}


def test_extract_links_honours_base_tag():
    html = '<html><head><base href="https://site.test/docs/"></head><body><a href="guide">g</a></body></html>'
    assert extract_links(html, "https://site.test/other/page") == {"https://site.test/docs/guide"}


def test_extract_links_blank_or_anchorless_markup_returns_empty_set():
    assert extract_links("", "https://site.test/") == set()
    assert extract_links("   ", "https://site.test/") == set()
    assert extract_links("<html><body><p>No links</p></body></html>", "https://site.test/") == set()


def test_soup_link_extractor_delegates():
    extractor = SoupLinkExtractor()
    assert extractor.extract('<a href="/x">x</a>', "https://site.test/") == {"https://site.test/x"}
