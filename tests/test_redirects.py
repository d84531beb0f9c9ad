import pytest

from reviewlink.application.redirects import RedirectResolver, RedirectState
from reviewlink.domain.deep_links import build_whatsapp_link, clean_phone_number, encode_uri_component


def test_encode_uri_component_matches_browser_encoding():
    assert encode_uri_component("Great service!") == "Great%20service!"
    assert encode_uri_component("a&b=c/d?") == "a%26b%3Dc%2Fd%3F"
    assert encode_uri_component("(it's) ~fine*") == "(it's)%20~fine*"
    assert encode_uri_component("café") == "caf%C3%A9"


@pytest.mark.parametrize(
    "number, expected",
    [
        ("+91 98765-43210", "+919876543210"),
        ("(555) 123.4567", "5551234567"),
        ("", ""),
        (None, ""),
        ("call me", ""),
    ],
)
def test_clean_phone_number(number, expected):
    assert clean_phone_number(number) == expected


def test_link_targets_business_number():
    assert build_whatsapp_link("Hi there", "+91 98765-43210") == "https://wa.me/+919876543210?text=Hi%20there"


def test_link_without_number_is_generic():
    assert build_whatsapp_link("Hi there") == "https://wa.me/?text=Hi%20there"
    assert build_whatsapp_link("Hi there", "---") == "https://wa.me/?text=Hi%20there"


def test_resolve_found(short_links):
    code = short_links.create("Great service!", "Asha")
    resolver = RedirectResolver(short_links, business_number="+91 98765-43210")

    outcome = resolver.resolve(code)

    assert outcome.state is RedirectState.FOUND
    assert outcome.location == "https://wa.me/+919876543210?text=Great%20service!"


def test_resolve_found_without_business_number(short_links):
    code = short_links.create("Great service!", "Asha")

    outcome = RedirectResolver(short_links).resolve(code)

    assert outcome.location == "https://wa.me/?text=Great%20service!"


@pytest.mark.parametrize("code", ["", "abc", None])
def test_short_codes_are_invalid(short_links, link_store, code):
    outcome = RedirectResolver(short_links).resolve(code)

    assert outcome.state is RedirectState.INVALID
    assert outcome.location is None


def test_unknown_code_not_found(short_links):
    assert RedirectResolver(short_links).resolve("zzzzzz").state is RedirectState.NOT_FOUND


def test_expired_code_not_found(short_links, clock):
    code = short_links.create("Great service!", "Asha", expires_in_hours=1)
    clock.advance(hours=2)

    assert RedirectResolver(short_links).resolve(code).state is RedirectState.NOT_FOUND


def test_direct_link_ignores_business_number(short_links, link_store):
    resolver = RedirectResolver(short_links, business_number="+919876543210")

    assert resolver.direct_link("Hello World") == "https://wa.me/?text=Hello%20World"
    assert link_store.links == {}
