from __future__ import annotations

from frontend.services.cover_loader import FAILED_URL_LIMIT, CoverLoader


def test_broken_cover_is_fetched_once(qapp, pool, tmp_path):
    loader = CoverLoader(thread_pool=pool)
    failures = []
    loader.fetchFailed.connect(failures.append)
    url = str(tmp_path / "missing.jpg")

    started = 0
    for _ in range(5):
        assert loader.get(url) is None
        started += len(pool.tasks)
        pool.run_all()

    assert started == 1
    assert loader.has_failed(url)
    assert failures == [url]


def test_inflight_fetch_is_not_duplicated(qapp, pool, tmp_path):
    loader = CoverLoader(thread_pool=pool)
    url = str(tmp_path / "slow.jpg")
    loader.get(url)
    loader.get(url)
    assert len(pool.tasks) == 1


def test_undecodable_bytes_count_as_failure(qapp, pool, tmp_path):
    loader = CoverLoader(thread_pool=pool)
    path = tmp_path / "empty.jpg"
    path.write_bytes(b"")
    loader.get(str(path))
    pool.run_all()
    assert loader.has_failed(str(path))


def test_forget_failures_allows_retry(qapp, pool, tmp_path):
    loader = CoverLoader(thread_pool=pool)
    url = str(tmp_path / "missing.jpg")
    loader.get(url)
    pool.run_all()

    loader.forget_failures()
    assert not loader.has_failed(url)
    loader.get(url)
    assert len(pool.tasks) == 1


def test_failed_set_is_bounded(qapp, pool, tmp_path):
    loader = CoverLoader(thread_pool=pool)
    urls = [str(tmp_path / f"missing-{i}.jpg") for i in range(FAILED_URL_LIMIT + 1)]
    for url in urls:
        loader.get(url)
    pool.run_all()
    assert not loader.has_failed(urls[0])
    assert loader.has_failed(urls[-1])


def test_empty_url_never_fetches(qapp, pool):
    loader = CoverLoader(thread_pool=pool)
    assert loader.get("") is None
    assert pool.tasks == []
