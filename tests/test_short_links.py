from datetime import timedelta

import pytest

from reviewlink.application.short_links import GenerationExhaustedError, ShortLinkService
from reviewlink.domain.models import ResolvedLink, ShortLink
from reviewlink.domain.ports import DuplicateShortCodeError
from reviewlink.domain.short_codes import SHORT_CODE_ALPHABET, generate_short_code

from .conftest import APP_URL, InMemoryLinkStore, sequence_generator


def test_generate_short_code_uses_alphabet():
    code = generate_short_code()

    assert len(code) == 6
    assert set(code) <= set(SHORT_CODE_ALPHABET)


def test_generate_short_code_rejects_zero_length():
    with pytest.raises(ValueError):
        generate_short_code(0)


def test_create_then_resolve_round_trip(short_links, link_store):
    code = short_links.create("Great service and lovely staff", "Asha", "SKS Jewellery", "Gold ring")

    resolved = short_links.resolve(code)

    assert resolved == ResolvedLink(
        review_text="Great service and lovely staff",
        customer_name="Asha",
        shop_name="SKS Jewellery",
        product_name="Gold ring",
    )
    assert link_store.links[code].clicks == 1


def test_create_sets_expiry_from_clock(short_links, link_store, clock):
    code = short_links.create("Great service", "Asha", expires_in_hours=24)

    link = link_store.links[code]
    assert link.created_at == clock.now
    assert link.expires_at == clock.now + timedelta(hours=24)
    assert link.clicks == 0


def test_create_rejects_empty_review_text(short_links):
    with pytest.raises(ValueError):
        short_links.create("", "Asha")


def test_short_url(short_links):
    assert short_links.short_url("abc123") == f"{APP_URL}/r/abc123"


def test_clicks_count_every_resolution(short_links, link_store):
    code = short_links.create("Great service", "Asha")

    for _ in range(3):
        assert short_links.resolve(code) is not None

    assert link_store.links[code].clicks == 3


def test_unknown_code_resolves_to_none(short_links):
    assert short_links.resolve("nope42") is None


def test_expired_link_resolves_to_none_and_is_not_counted(short_links, link_store, clock):
    code = short_links.create("Great service", "Asha", expires_in_hours=168)

    clock.advance(hours=168)

    assert short_links.resolve(code) is None
    assert link_store.links[code].clicks == 0


def test_link_resolves_until_just_before_expiry(short_links, clock):
    code = short_links.create("Great service", "Asha", expires_in_hours=1)

    clock.advance(minutes=59)

    assert short_links.resolve(code) is not None


def test_collision_retries_with_new_code(link_store, clock):
    link_store.insert(ShortLink(short_code="xxxxxx", review_text="old", customer_name="Old", created_at=clock.now))
    generator = sequence_generator("xxxxxx", "yyyyyy")
    service = ShortLinkService(link_store, code_generator=generator, clock=clock)

    code = service.create("New review text", "Ravi")

    assert code == "yyyyyy"
    assert link_store.links["xxxxxx"].review_text == "old"
    assert link_store.links["yyyyyy"].review_text == "New review text"
    assert len(generator.calls) == 2


def test_duplicate_on_insert_counts_as_collision(clock):
    class RacingStore(InMemoryLinkStore):
        """Lookup misses but the insert loses the race for the first code."""

        def insert(self, link):
            if link.short_code == "xxxxxx":
                raise DuplicateShortCodeError(link.short_code)
            super().insert(link)

    store = RacingStore()
    service = ShortLinkService(store, code_generator=sequence_generator("xxxxxx", "zzzzzz"), clock=clock)

    assert service.create("Review text", "Ravi") == "zzzzzz"


def test_exhausted_attempts_raise(link_store, clock):
    link_store.insert(ShortLink(short_code="xxxxxx", review_text="old", customer_name="Old", created_at=clock.now))
    generator = sequence_generator("xxxxxx")
    service = ShortLinkService(link_store, code_generator=generator, clock=clock, max_attempts=5)

    with pytest.raises(GenerationExhaustedError):
        service.create("New review text", "Ravi")

    assert len(generator.calls) == 5
    assert list(link_store.links) == ["xxxxxx"]


def test_store_failure_on_resolve_returns_none(clock):
    class BrokenStore(InMemoryLinkStore):
        def get(self, short_code):
            raise RuntimeError("database is locked")

    service = ShortLinkService(BrokenStore(), clock=clock)

    assert service.resolve("abc123") is None


def test_cleanup_removes_expired_and_old_links(short_links, link_store, clock):
    stale = short_links.create("Old review", "Asha", expires_in_hours=24 * 60)
    clock.advance(days=35)
    expired = short_links.create("Expired review", "Ravi", expires_in_hours=1)
    clock.advance(hours=2)
    fresh = short_links.create("Fresh review", "Meera", expires_in_hours=168)

    deleted = short_links.cleanup_expired(older_than_days=30)

    assert deleted == 2
    assert stale not in link_store.links
    assert expired not in link_store.links
    assert fresh in link_store.links


def test_cleanup_keeps_live_links(short_links, link_store, clock):
    code = short_links.create("Fresh review", "Meera", expires_in_hours=168)
    clock.advance(days=1)

    assert short_links.cleanup_expired(older_than_days=30) == 0
    assert code in link_store.links


def test_cleanup_returns_zero_on_store_failure(clock):
    class BrokenStore(InMemoryLinkStore):
        def delete_expired(self, now, created_before):
            raise RuntimeError("disk I/O error")

    assert ShortLinkService(BrokenStore(), clock=clock).cleanup_expired() == 0
