from concurrent.futures import ThreadPoolExecutor

from stock_checker.likes import LikeLedger, anonymize_address


def test_unknown_symbol_has_no_likes():
    assert LikeLedger().count_likes("GOOG") == 0


def test_record_like_is_idempotent():
    ledger = LikeLedger()

    assert ledger.record_like("GOOG", "visitor-1") is True
    assert ledger.record_like("GOOG", "visitor-1") is False
    assert ledger.record_like("GOOG", "visitor-2") is True

    assert ledger.count_likes("GOOG") == 2
    assert ledger.count_likes("MSFT") == 0


def test_anonymize_address_hides_raw_address():
    digest = anonymize_address("203.0.113.10")

    assert len(digest) == 64
    assert "203.0.113.10" not in digest
    assert digest == anonymize_address("203.0.113.10")
    assert digest != anonymize_address("203.0.113.11")


def test_concurrent_likes_are_not_lost():
    ledger = LikeLedger()
    jobs = [(symbol, f"visitor-{i}") for i in range(200) for symbol in ("GOOG", "MSFT")]

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda job: ledger.record_like(*job), jobs))
        list(pool.map(lambda job: ledger.record_like(*job), jobs))

    assert ledger.count_likes("GOOG") == 200
    assert ledger.count_likes("MSFT") == 200
