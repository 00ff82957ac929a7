"""Tests for the Sutton scraper."""

from datetime import date

from scrapers.sutton import SuttonScraper, is_last_page, parse_listings
from tests.fakes import FakePage

BASE_URL = "https://www.suttonquebec.com/fr/recherche/residentiel"


def item(native_id, price="425000", sold=False, city="Magog"):
    sold_html = '<span class="vendu">Vendu</span>' if sold else ""
    city_html = f"<p><span>{city}</span><span>Estrie</span></p>" if city else "<p></p>"
    return f"""
    <li data-inscription-id="{native_id}" data-prix="{price}">
        {sold_html}
        <div class="divInscriptionPhoto compact"><img src="/photos/{native_id}.jpg"></div>
        <div class="divInscriptionInfo">
            <h2><a href="/fr/propriete/{native_id}">Maison à étages - 3 chambres</a></h2>
            {city_html}
        </div>
        <div class="divInfoCompact"><address> 45 rue Principale </address></div>
    </li>
    """


def results_page(items, last=False, with_pager=True):
    pager = ""
    if with_pager:
        pager = f'<div class="divControleListe"><a class="pagesuivante{" hidden" if last else ""}">Suivante</a></div>'
    return f"<html><body><ul>{''.join(items)}</ul>{pager}</body></html>"


def test_parse_listings_extracts_core_fields():
    listings = parse_listings(results_page([item("20194857")]), "2024-05-01", BASE_URL)

    listing = listings["sutton-20194857"]
    assert listing.price == 425000
    assert listing.city == "Magog"
    assert listing.address == "45 rue Principale"
    assert listing.description == "Maison à étages"
    assert listing.image_url == "https://www.suttonquebec.com/photos/20194857.jpg"
    assert listing.url == "https://www.suttonquebec.com/fr/propriete/20194857"
    assert listing.source == "Sutton"


def test_parse_listings_skips_sold_items():
    html = results_page([item("1", sold=True), item("2")])

    assert list(parse_listings(html, "2024-05-01", BASE_URL)) == ["sutton-2"]


def test_parse_listings_skips_items_without_valid_price_or_id():
    html = results_page([item("3", price=""), item("bad id"), item("4")])

    assert list(parse_listings(html, "2024-05-01", BASE_URL)) == ["sutton-4"]


def test_parse_listings_missing_city_is_none():
    listing = parse_listings(results_page([item("5", city=None)]), "2024-05-01", BASE_URL)["sutton-5"]

    assert listing.city is None


def test_is_last_page_when_next_control_hidden_or_missing():
    assert is_last_page(results_page([], last=True))
    assert is_last_page(results_page([], with_pager=False))
    assert not is_last_page(results_page([], last=False))


def test_scan_waits_for_settle_after_each_page(monkeypatch):
    delays = []
    monkeypatch.setattr("scrapers.sutton.delay", delays.append)

    pages = [
        results_page([item("1")]),
        results_page([item("2"), item("3", sold=True)]),
        results_page([item("4")], last=True),
    ]
    page = FakePage(pages)
    scraper = SuttonScraper(url=BASE_URL)

    listings = scraper.scan(page, today=date(2024, 5, 1))

    assert sorted(listings) == ["sutton-1", "sutton-2", "sutton-4"]
    assert page.navigations == 2
    assert delays == [scraper.settle_delay, scraper.settle_delay]


def test_parse_listings_drops_items_missing_image_or_link():
    no_image = item("6").replace('<img src="/photos/6.jpg">', "")
    no_link = item("7").replace('<a href="/fr/propriete/7">', "<a>")
    html = results_page([no_image, no_link, item("8")])

    assert list(parse_listings(html, "2024-05-01", BASE_URL)) == ["sutton-8"]


def test_is_last_page_when_any_pager_copy_is_hidden():
    html = """
    <div class="divControleListe"><a class="pagesuivante">Suivante</a></div>
    <ul></ul>
    <div class="divControleListe"><a class="pagesuivante hidden">Suivante</a></div>
    """

    assert is_last_page(html)
