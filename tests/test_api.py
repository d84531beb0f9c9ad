from unittest.mock import patch

import pytest

from reviewlink.domain.models import DeliveryResult
from reviewlink.infrastructure.llm import ReviewGenerationError


def _submission(**overrides):
    body = {
        "shopName": "SKS Jewellery",
        "shopEmail": "shop@example.com",
        "customerName": "Asha Patil",
        "customerEmail": "asha@example.com",
        "phoneNumber": "+919876543210",
        "productName": "Gold necklace",
        "rating": 5,
        "reviewText": "Beautiful designs and very helpful staff, will visit again!",
        "sendSMS": True,
        "sendWhatsApp": False,
    }
    body.update(overrides)
    return body


# ── Health & status ────────────────────────────────────────────────

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_status_reports_channels_and_limits(client):
    data = client.get("/api/status").json()

    assert data["sms"]["configured"] is True
    assert data["whatsapp"]["provider"] == "twilio"
    assert data["gemini"]["configured"] is True
    assert data["shortLinks"]["baseUrl"] == "https://reviews.test"
    assert data["shortLinks"]["businessNumberConfigured"] is True
    assert data["limits"]["gsm7"] == {"single": 160, "segment": 153, "max": 1600}
    assert data["limits"]["recommended"] == 320


# ── Review submission ──────────────────────────────────────────────

def test_submit_review_over_sms(client, services, sms_sender, whatsapp_sender):
    sms_sender.result = DeliveryResult(success=True, message_id="SM1", segments=1)

    response = client.post("/api/reviews", json=_submission())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["status"] == "SENT"
    assert data["results"] == {"sms": {"success": True, "messageId": "SM1", "segments": 1}}
    assert whatsapp_sender.sent == []

    phone, body = sms_sender.sent[0]
    assert phone == "+919876543210"
    assert "https://reviews.test/r/" in body

    review = services.database.get_review(data["reviewId"])
    assert review.status == "SENT"
    assert review.send_sms is True


def test_short_link_from_sms_redirects_to_whatsapp(client, sms_sender):
    client.post("/api/reviews", json=_submission())
    body = sms_sender.sent[0][1]
    code = body.split("/r/")[1].split()[0]

    response = client.get(f"/r/{code}", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == (
        "https://wa.me/+919876543210?text=Beautiful%20designs%20and%20very%20helpful%20staff%2C"
        "%20will%20visit%20again!"
    )


def test_all_channels_failed_marks_review_failed(client, services, sms_sender):
    sms_sender.result = DeliveryResult.failure("Missing Twilio credentials")

    data = client.post("/api/reviews", json=_submission()).json()

    assert data["success"] is True
    assert data["status"] == "FAILED"
    assert data["results"] == {"sms": {"success": False, "error": "Missing Twilio credentials"}}
    assert services.database.get_review(data["reviewId"]).status == "FAILED"


def test_both_channels(client, sms_sender, whatsapp_sender):
    data = client.post("/api/reviews", json=_submission(sendWhatsApp=True)).json()

    assert data["status"] == "SENT"
    assert set(data["results"]) == {"sms", "whatsapp"}
    assert "Beautiful designs" in whatsapp_sender.sent[0][1]


def test_whatsapp_only_route_ignores_sms_flag(client, sms_sender, whatsapp_sender):
    data = client.post("/api/reviews/whatsapp", json=_submission(sendSMS=True)).json()

    assert data["status"] == "SENT"
    assert list(data["results"]) == ["whatsapp"]
    assert sms_sender.sent == []


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"sendSMS": False, "sendWhatsApp": False}, None),
        ({"reviewText": "Too short"}, "reviewText"),
        ({"shopEmail": "not-an-email"}, "shopEmail"),
        ({"rating": 6}, "rating"),
        ({"phoneNumber": "12345"}, "phoneNumber"),
    ],
)
def test_invalid_submission_is_rejected(client, services, overrides, field):
    response = client.post("/api/reviews", json=_submission(**overrides))

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid input"
    if field:
        assert field in [detail["field"] for detail in data["details"]]


def test_database_failure_returns_500(client, services, sms_sender):
    with patch.object(services.database, "create_review", side_effect=RuntimeError("disk full")):
        response = client.post("/api/reviews", json=_submission())

    assert response.status_code == 500
    assert response.json() == {"error": "Database storage failed"}
    assert sms_sender.sent == []


def test_status_update_failure_still_returns_result(client, services):
    with patch.object(services.database, "update_review_status", side_effect=RuntimeError("locked")):
        response = client.post("/api/reviews", json=_submission())

    assert response.status_code == 200
    assert response.json()["status"] == "SENT"


# ── Short link redirect ────────────────────────────────────────────

def test_redirect_for_stored_link(client, services):
    code = services.short_links.create("Great service!", "Asha")

    response = client.get(f"/r/{code}", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "https://wa.me/+919876543210?text=Great%20service!"


def test_redirect_unknown_code_shows_page(client):
    response = client.get("/r/zzzzzz", follow_redirects=False)

    assert response.status_code == 404
    assert "Link not found or expired" in response.text


def test_redirect_expired_code(client, services, clock):
    code = services.short_links.create("Great service!", "Asha", expires_in_hours=1)
    clock.advance(hours=2)

    assert client.get(f"/r/{code}", follow_redirects=False).status_code == 404


def test_redirect_rejects_short_code(client):
    response = client.get("/r/abc", follow_redirects=False)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid short code"}


def test_redirect_internal_error(client, services):
    with patch.object(services.redirects, "resolve", side_effect=RuntimeError("boom")):
        response = client.get("/r/abc123", follow_redirects=False)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process redirect"}


# ── Inline WhatsApp redirect ───────────────────────────────────────

def test_wa_redirect_get(client, link_store):
    response = client.get("/api/wa-redirect", params={"text": "Hello World"}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "https://wa.me/?text=Hello%20World"
    assert link_store.links == {}


def test_wa_redirect_get_requires_text(client):
    response = client.get("/api/wa-redirect", follow_redirects=False)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing text parameter"}


def test_wa_redirect_post(client):
    response = client.post("/api/wa-redirect", json={"text": "Hi there", "reviewId": 7})

    assert response.json() == {"success": True, "redirectUrl": "https://wa.me/?text=Hi%20there"}


def test_wa_redirect_post_requires_text(client):
    response = client.post("/api/wa-redirect", json={})

    assert response.status_code == 400


# ── Review generation ──────────────────────────────────────────────

def _generation_request(**overrides):
    body = {
        "orgName": "SKS Jewellery",
        "orgType": "Jewellery store",
        "customerName": "Asha",
        "purchaseType": "Gold necklace",
        "purchaseFrequency": "Regular",
    }
    body.update(overrides)
    return body


def test_generate_review(client, text_generator):
    text_generator.text = "  I loved shopping here.  "

    response = client.post(
        "/api/generate-review",
        json=_generation_request(
            shopLocation="mumbai_bandra",
            shoppingMotivation=["quality", "gifting"],
            satisfactionLevel="",
        ),
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "review": "I loved shopping here."}
    prompt = text_generator.prompts[0]
    assert "- Shop Location: Mumbai - Bandra West" in prompt
    assert "- Shopping Motivation: quality, gifting" in prompt
    assert "- Overall Satisfaction (1-10): 8" in prompt


def test_generate_review_requires_fields(client):
    response = client.post("/api/generate-review", json={"orgName": "SKS Jewellery"})

    assert response.status_code == 400
    fields = [detail["field"] for detail in response.json()["details"]]
    assert "orgType" in fields


def test_generate_review_backend_failure(client, text_generator):
    text_generator.error = ReviewGenerationError("GOOGLE_API_KEY not configured")

    response = client.post("/api/generate-review", json=_generation_request())

    assert response.status_code == 500
    assert response.json() == {"error": "GOOGLE_API_KEY not configured"}
