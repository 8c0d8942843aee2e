import pytest
import requests

from pipelines.augment_page import augment_html, augment_source, summarize
from scraper.errors.exceptions import ExtractionError, NetworkError
from scraper.sources import page_fetch


def test_augment_html_reports_all_packages(packages_html):
    page, results = augment_html(packages_html, logger=lambda _m: None)

    assert len(results) == 4
    assert sum(1 for r in results if r.metric is not None) == 3
    assert page.html().count('class="price-per-gb-extension"') == 3


def test_augment_html_sorted(packages_html):
    page, results = augment_html(packages_html, sort=True, logger=lambda _m: None)

    assert [el["id"] for el in page.packages()] == ["p3", "p1", "p4", "p2"]
    assert [r.metric for r in results] == [20000.0, 30000.0, 100000.0, None]


def test_augment_html_without_packages_raises():
    with pytest.raises(ExtractionError):
        augment_html("<html><body><p>nothing here</p></body></html>", logger=lambda _m: None)


def test_augment_source_reads_file(tmp_path, packages_html):
    path = tmp_path / "packages.html"
    path.write_text(packages_html, encoding="utf-8")

    page, results = augment_source(str(path), logger=lambda _m: None)
    assert results[0].formatted == "30,000"


def test_missing_file_is_network_error(tmp_path):
    with pytest.raises(NetworkError):
        augment_source(str(tmp_path / "missing.html"), logger=lambda _m: None)


def test_fetch_html_wraps_request_errors(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(page_fetch.requests, "get", boom)

    with pytest.raises(NetworkError) as exc:
        page_fetch.fetch_html("https://example.ir/packages")
    assert exc.value.url == "https://example.ir/packages"


def test_augment_source_fetches_urls(monkeypatch, packages_html):
    monkeypatch.setattr(page_fetch, "fetch_html", lambda url: packages_html)

    page, results = augment_source("https://example.ir/packages", logger=lambda _m: None)
    assert len(results) == 4


def test_summarize_marks_skips_and_guesses(packages_html):
    _page, results = augment_html(packages_html, logger=lambda _m: None)
    lines = summarize(results)

    assert len(lines) == 4
    assert "30,000" in lines[0]
    assert "skipped (missing_price_or_size)" in lines[1]
    assert "guessed unit" not in "".join(lines)


def test_summarize_flags_guessed_unit():
    html = """
    <div class="card-templ-wrapper">
      <div class="card-description"><h6>بسته ۷ روزه ۲۰۰</h6></div>
      <div class="card-price"><span class="fa-number">۲۰,۰۰۰</span></div>
    </div>
    """
    _page, results = augment_html(html, logger=lambda _m: None)

    assert results[0].size_reading.is_heuristic
    assert "(guessed unit)" in summarize(results)[0]
