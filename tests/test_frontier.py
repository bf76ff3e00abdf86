import threading

from image_crawler.core.frontier import Frontier
from image_crawler.rules import ImageCrawlerRules

from conftest import wait_for


def make_frontier() -> Frontier:
    return Frontier(ImageCrawlerRules("https://example.com/"), poll_interval=0.05)


def test_add_is_idempotent():
    frontier = make_frontier()
    assert frontier.add("https://example.com/a") is True
    assert frontier.add("https://example.com/a") is False
    assert len(frontier) == 1


def test_add_drops_invalid_urls_silently():
    frontier = make_frontier()
    assert frontier.add("https://elsewhere.org/") is False
    assert frontier.add(None) is False
    assert frontier.pending == 0


def test_take_all_yields_in_arrival_order_for_single_producer():
    frontier = make_frontier()
    for name in ("a", "b", "c"):
        frontier.add(f"https://example.com/{name}")

    consumed = []
    for url in frontier.take_all():
        consumed.append(url)
        if len(consumed) == 3:
            break

    assert consumed == [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c",
    ]


def test_blocked_consumer_resumes_when_url_added():
    frontier = make_frontier()
    consumed = []

    def consume():
        for url in frontier.take_all():
            consumed.append(url)

    consumer = threading.Thread(target=consume, daemon=True)
    consumer.start()

    assert not wait_for(lambda: consumed, timeout=0.2)

    frontier.add("https://example.com/late")
    assert wait_for(lambda: consumed == ["https://example.com/late"])

    frontier.close()
    consumer.join(timeout=2)
    assert not consumer.is_alive()


def test_each_url_consumed_by_exactly_one_consumer():
    frontier = make_frontier()
    consumed = []
    lock = threading.Lock()

    def consume():
        for url in frontier.take_all():
            with lock:
                consumed.append(url)

    consumers = [threading.Thread(target=consume, daemon=True) for _ in range(4)]
    for c in consumers:
        c.start()

    urls = [f"https://example.com/{i}" for i in range(200)]
    for url in urls:
        frontier.add(url)

    assert wait_for(lambda: len(consumed) == len(urls))
    frontier.close()
    for c in consumers:
        c.join(timeout=2)

    assert sorted(consumed) == sorted(urls)


def test_close_refuses_new_urls():
    frontier = make_frontier()
    frontier.close()
    assert frontier.closed
    assert frontier.add("https://example.com/a") is False
    assert list(frontier.take_all()) == []
