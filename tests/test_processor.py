from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from PIL import Image

from image_crawler.processing.fetcher import NetworkError
from image_crawler.processing.processor import ImageProcessor
from image_crawler.rules import ImageProcessorRules

from conftest import FakeFetcher, make_image_bytes


PAGE = "https://site.test/gallery/index.html"


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


@pytest.fixture()
def rules() -> ImageProcessorRules:
    return ImageProcessorRules([".png", ".jpg"], min_width=300, min_height=300)


def make_processor(rules, tmp_path, images=None, failures=None):
    fetcher = FakeFetcher(images=images, failures=failures)
    return ImageProcessor(rules, str(tmp_path), fetcher=fetcher), fetcher


def test_destination_folder_mirrors_page_url(rules, tmp_path):
    processor, _ = make_processor(rules, tmp_path)
    assert processor.destination_folder(PAGE) == tmp_path / "site.test" / "gallery" / "index.html"
    assert processor.destination_folder("https://site.test/") == tmp_path / "site.test"


def test_destination_folder_port_and_dot_segments(rules, tmp_path):
    processor, _ = make_processor(rules, tmp_path)
    folder = processor.destination_folder("http://site.test:8080/a/./../b")
    assert folder == tmp_path / "site.test_8080" / "a" / "b"


def test_saves_images_from_img_and_anchor_tags(rules, tmp_path):
    big_png = make_image_bytes(400, 400)
    big_jpg = make_image_bytes(640, 480, fmt="JPEG")
    processor, _ = make_processor(rules, tmp_path, images={
        "https://site.test/img/a.png": big_png,
        "https://site.test/gallery/b.jpg": big_jpg,
    })

    processor.process(PAGE, soup("""
        <img src="/img/a.png">
        <a href="b.jpg">full size</a>
        <a href="other.html">next page</a>
    """))

    folder = tmp_path / "site.test" / "gallery" / "index.html"
    assert (folder / "a.png").read_bytes() == big_png
    assert (folder / "b.jpg").read_bytes() == big_jpg

    stats = processor.get_stats()
    assert stats["pages_processed"] == 1
    assert stats["images_downloaded"] == 2
    assert stats["errors"] == 0


def test_non_image_links_are_not_fetched(rules, tmp_path):
    processor, fetcher = make_processor(rules, tmp_path)
    processor.process(PAGE, soup('<a href="other.html">x</a><a href="doc.pdf">y</a>'))
    assert sum(fetcher.bytes_calls.values()) == 0


def test_small_images_are_rejected(rules, tmp_path):
    processor, _ = make_processor(rules, tmp_path, images={
        "https://site.test/gallery/thumb.png": make_image_bytes(300, 300),
    })

    processor.process(PAGE, soup('<img src="thumb.png">'))

    assert not list(Path(tmp_path).rglob("thumb.png"))
    assert processor.get_stats()["images_rejected"] == 1


def test_existing_file_is_not_overwritten(rules, tmp_path):
    folder = tmp_path / "site.test" / "gallery" / "index.html"
    folder.mkdir(parents=True)
    (folder / "a.png").write_bytes(b"old")

    processor, _ = make_processor(rules, tmp_path, images={
        "https://site.test/gallery/a.png": make_image_bytes(500, 500),
    })
    processor.process(PAGE, soup('<img src="a.png">'))

    assert (folder / "a.png").read_bytes() == b"old"
    assert processor.get_stats()["images_existing"] == 1


def test_fetch_failure_does_not_stop_other_images(rules, tmp_path):
    processor, _ = make_processor(
        rules, tmp_path,
        images={"https://site.test/gallery/ok.png": make_image_bytes(500, 500)},
        failures={"https://site.test/gallery/broken.png": NetworkError(
            "https://site.test/gallery/broken.png", "Request Error: timed out")},
    )

    processor.process(PAGE, soup('<img src="broken.png"><img src="ok.png">'))

    folder = tmp_path / "site.test" / "gallery" / "index.html"
    assert (folder / "ok.png").exists()
    assert not (folder / "broken.png").exists()
    assert processor.get_stats()["errors"] == 1


def test_undecodable_image_is_skipped(rules, tmp_path):
    processor, _ = make_processor(rules, tmp_path, images={
        "https://site.test/gallery/fake.png": b"<html>not an image</html>",
        "https://site.test/gallery/real.png": make_image_bytes(500, 500),
    })

    processor.process(PAGE, soup('<img src="fake.png"><img src="real.png">'))

    folder = tmp_path / "site.test" / "gallery" / "index.html"
    assert not (folder / "fake.png").exists()
    assert (folder / "real.png").exists()
    assert processor.get_stats()["errors"] == 1


def test_oversized_image_does_not_stop_other_images(rules, tmp_path, monkeypatch):
    # 2000x2000 is over twice the limit; 400x400 is under it
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 200_000)
    processor, fetcher = make_processor(rules, tmp_path, images={
        "https://site.test/gallery/huge.png": make_image_bytes(2000, 2000),
        "https://site.test/gallery/ok.png": make_image_bytes(400, 400),
    })

    processor.process(PAGE, soup('<img src="huge.png"><img src="ok.png">'))

    folder = tmp_path / "site.test" / "gallery" / "index.html"
    assert fetcher.bytes_calls["https://site.test/gallery/ok.png"] == 1
    assert (folder / "ok.png").exists()
    assert not (folder / "huge.png").exists()
    assert processor.get_stats()["errors"] == 1


def test_malformed_reference_is_skipped(rules, tmp_path):
    processor, _ = make_processor(rules, tmp_path, images={
        "https://site.test/gallery/real.png": make_image_bytes(500, 500),
    })

    processor.process(PAGE, soup('<img src="http://[::1/x.png"><img src="real.png">'))

    assert processor.get_stats()["images_downloaded"] == 1
    assert processor.get_stats()["errors"] == 1


def test_image_referenced_twice_is_fetched_once(rules, tmp_path):
    url = "https://site.test/gallery/a.png"
    processor, fetcher = make_processor(rules, tmp_path, images={url: make_image_bytes(500, 500)})

    processor.process(PAGE, soup('<img src="a.png"><a href="a.png#zoom">zoom</a>'))
    processor.process("https://site.test/other", soup('<img src="/gallery/a.png">'))

    assert fetcher.bytes_calls[url] == 1


def test_process_ignores_missing_document(rules, tmp_path):
    processor, _ = make_processor(rules, tmp_path)
    processor.process(PAGE, None)
    assert processor.get_stats()["pages_processed"] == 0


def test_close_closes_fetcher(rules, tmp_path):
    processor, fetcher = make_processor(rules, tmp_path)
    processor.close()
    assert fetcher.closed
