"""
FastAPI Web Application - Review Link API
=========================================

JSON API for review submission and generation, plus the public short-link
redirect that customers open from their SMS.

Routes doing database or third-party I/O are plain `def` functions so
FastAPI runs them in its thread pool; a slow Twilio or Gemini call does not
hold up other requests.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from ..application.redirects import RedirectState
from ..domain.sms_encoding import limits_summary
from ..infrastructure.config import get_settings
from .schemas import GenerateReviewRequest, ReviewSubmission, ReviewSubmissionBase, WhatsAppRedirectRequest
from .services import Services, build_services

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════
#  HTML TEMPLATE RENDERERS
# ══════════════════════════════════════════════════════════════════

def render_link_not_found_page() -> str:
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Link not found</title>
    <style>
        body {
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
            background: #0a0a14; color: #e2e8f0;
            min-height: 100vh; display: flex; align-items: center; justify-content: center;
        }
        .card {
            max-width: 420px; padding: 40px 32px; text-align: center;
            background: rgba(255,255,255,0.035);
            border: 1px solid rgba(255,255,255,0.07); border-radius: 16px;
        }
        h1 { font-size: 22px; margin-bottom: 12px; }
        p { color: #64748b; font-size: 14px; line-height: 1.6; }
    </style>
</head>
<body>
    <div class="card">
        <h1>Link not found or expired</h1>
        <p>This review link is no longer available. Please ask the shop to send you a new one.</p>
    </div>
</body>
</html>"""


# ══════════════════════════════════════════════════════════════════
#  APP FACTORY
# ══════════════════════════════════════════════════════════════════

def get_services(request: Request) -> Services:
    return request.app.state.services


def _error(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build the FastAPI app.
    Pass `services` to run against injected collaborators (tests); otherwise
    they are built from environment settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "services", None) is None:
            settings = get_settings()
            for issue in settings.validate():
                logger.warning(issue)
            app.state.services = build_services(settings)
        logger.info("Review Link ready")
        yield

    app = FastAPI(title="Review Link", description="Review delivery over SMS and WhatsApp", lifespan=lifespan)
    app.state.services = services

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"), "message": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.info(f"Rejected {request.method} {request.url.path}: {details}")
        return _error("Invalid input", 400, details=details)

    register_routes(app)
    return app


# ══════════════════════════════════════════════════════════════════
#  ROUTES
# ══════════════════════════════════════════════════════════════════

def register_routes(app: FastAPI) -> None:

    # ── Health & status ────────────────────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    @app.get("/api/status")
    async def api_status(services: Services = Depends(get_services)):
        settings = services.settings
        return {
            "sms": services.sms_sender.status(),
            "whatsapp": {"provider": settings.whatsapp.provider, **services.whatsapp_sender.status()},
            "gemini": services.review_generator.status(),
            "shortLinks": {
                "baseUrl": settings.short_links.base_url,
                "expiresInHours": settings.short_links.expires_in_hours,
                "businessNumberConfigured": bool(settings.whatsapp.business_number),
            },
            "limits": limits_summary(),
            "warnings": settings.validate(),
        }

    # ── Short link redirect ────────────────────────────────────────

    @app.get("/r/{code}")
    def short_link_redirect(code: str, services: Services = Depends(get_services)):
        try:
            outcome = services.redirects.resolve(code)
        except Exception as e:
            logger.exception(f"Short link redirect failed for {code}: {e}")
            return _error("Failed to process redirect", 500)

        if outcome.state is RedirectState.INVALID:
            return _error("Invalid short code", 400)

        if outcome.state is RedirectState.NOT_FOUND:
            return HTMLResponse(render_link_not_found_page(), status_code=404)

        return RedirectResponse(url=outcome.location, status_code=302)

    # ── Inline WhatsApp redirect (nothing stored) ──────────────────

    @app.get("/api/wa-redirect")
    def whatsapp_redirect(text: Optional[str] = None, services: Services = Depends(get_services)):
        if not text:
            return _error("Missing text parameter", 400)
        return RedirectResponse(url=services.redirects.direct_link(text), status_code=302)

    @app.post("/api/wa-redirect")
    def whatsapp_redirect_url(body: WhatsAppRedirectRequest, services: Services = Depends(get_services)):
        if not body.text:
            return _error("Missing text parameter", 400)

        if body.review_id is not None:
            logger.info(f"Review link clicked: {body.review_id}")

        return {"success": True, "redirectUrl": services.redirects.direct_link(body.text)}

    # ── Review submission ──────────────────────────────────────────

    @app.post("/api/reviews")
    def submit_review(submission: ReviewSubmission, services: Services = Depends(get_services)):
        try:
            return _deliver_review(services, submission, submission.send_sms, submission.send_whatsapp)
        except Exception as e:
            logger.exception(f"Review submission failed: {e}")
            return _error("Internal Server Error", 500)

    @app.post("/api/reviews/whatsapp")
    def submit_whatsapp_review(submission: ReviewSubmissionBase, services: Services = Depends(get_services)):
        try:
            return _deliver_review(services, submission, send_sms=False, send_whatsapp=True)
        except Exception as e:
            logger.exception(f"WhatsApp review submission failed: {e}")
            return _error("Internal Server Error", 500)

    # ── Review generation ──────────────────────────────────────────

    @app.post("/api/generate-review")
    def generate_review(body: GenerateReviewRequest, services: Services = Depends(get_services)):
        try:
            result = services.review_generator.generate(body.to_input())
        except Exception as e:
            logger.exception(f"Review generation failed: {e}")
            return _error("Internal Server Error", 500)

        if not result.success or not result.review:
            return _error(result.error or "Failed to generate review", 500)

        return {"success": True, "review": result.review}


def _deliver_review(services: Services, submission: ReviewSubmissionBase, send_sms: bool, send_whatsapp: bool):
    """Persist the review, send it on the chosen channels, record the outcome."""
    try:
        review_id = services.database.create_review(
            shop_name=submission.shop_name,
            shop_email=submission.shop_email,
            customer_name=submission.customer_name,
            customer_email=submission.customer_email,
            phone_number=submission.phone_number,
            product_name=submission.product_name,
            rating=submission.rating,
            review_text=submission.review_text,
            send_sms=send_sms,
            send_whatsapp=send_whatsapp,
        )
    except Exception as e:
        logger.exception(f"Database Error: {e}")
        return _error("Database storage failed", 500)

    outcome = services.dispatcher.dispatch(submission.to_message(), send_sms, send_whatsapp)

    try:
        services.database.update_review_status(review_id, outcome.status)
    except Exception as e:
        logger.exception(f"Failed to update review status for {review_id}: {e}")

    return {
        "success": True,
        "reviewId": review_id,
        "results": outcome.results_dict(),
        "status": outcome.status.value,
    }


app = create_app()
