"""
Review Generator - LLM-Based Review Drafting
============================================

ARCHITECTURAL DECISION:
- Uses the Google Gemini REST API (generateContent) via `requests`
- The prompt is assembled from structured form fields; empty fields are left out
- Returns a result object instead of raising, so the route only maps it to HTTP

EXTENSIBILITY:
- To use a different model: set GEMINI_MODEL
- To use another provider: implement the TextGenerator port and pass it to
  ReviewGenerator
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from ...domain.ports import TextGenerator
from ..config import LLMSettings

logger = logging.getLogger(__name__)


class ReviewGenerationError(Exception):
    """Base exception for review generation errors."""
    pass


class GeminiTextGenerator(TextGenerator):
    """
    Text generation with Google Gemini.

    USAGE:
        generator = GeminiTextGenerator(settings.llm)
        text = generator.generate("Write a short review of ...")
    """

    def __init__(self, settings: LLMSettings):
        self._api_key = settings.api_key
        self._api_url = settings.api_url.rstrip("/")
        self._model = settings.model
        self._timeout = settings.timeout_seconds

        if not self._api_key:
            logger.warning("No GOOGLE_API_KEY set. Review generation is disabled.")

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def generate(self, prompt: str) -> str:
        if not self._api_key:
            raise ReviewGenerationError("GOOGLE_API_KEY not configured")

        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            response = requests.post(
                f"{self._api_url}/models/{self._model}:generateContent",
                params={"key": self._api_key},
                json=payload,
                timeout=self._timeout
            )
            response.raise_for_status()
            data = response.json()

        except requests.Timeout as e:
            logger.warning("Gemini API timeout")
            raise ReviewGenerationError("Review generation timed out") from e

        except requests.RequestException as e:
            logger.warning(f"Gemini API error: {e}")
            raise ReviewGenerationError("Gemini API request failed") from e

        text = self._extract_response_text(data)
        if not text:
            raise ReviewGenerationError("Gemini returned an empty response")
        return text

    def _extract_response_text(self, data: dict) -> str:
        """Extract text content from API response."""
        try:
            candidates = data.get("candidates", [])
            if candidates:
                parts = candidates[0].get("content", {}).get("parts", [])
                return "".join(part.get("text", "") for part in parts).strip()
        except (KeyError, IndexError, TypeError, AttributeError):
            pass
        return ""


@dataclass
class ReviewGenerationInput:
    """Form fields the review prompt is built from."""

    # Organization
    org_name: str
    org_type: str
    customer_name: str
    purchase_type: str
    purchase_frequency: str
    attender_name: Optional[str] = None
    shop_location: Optional[str] = None
    org_description: Optional[str] = None

    # Customer / purchase
    customer_phone: Optional[str] = None
    purchase_duration: Optional[str] = None

    # Experience (1-10 scales)
    satisfaction_level: int = 8
    recommendation_likelihood: int = 9
    key_highlights: Optional[str] = None
    improvement_areas: Optional[str] = None
    events: Optional[str] = None

    # Behavioural
    shopping_motivation: Optional[str] = None
    price_sensitivity: Optional[str] = None
    brand_loyalty: Optional[str] = None
    emotional_connection: Optional[str] = None


@dataclass
class GenerationResult:
    success: bool
    review: Optional[str] = None
    error: Optional[str] = None


def _optional_line(label: str, value: Optional[str]) -> List[str]:
    return [f"- {label}: {value}"] if value else []


def build_review_prompt(data: ReviewGenerationInput) -> str:
    """Assemble the generation prompt; empty optional fields are omitted."""
    lines = [
        "Generate a realistic, detailed customer review for a business based on the following information:",
        "",
        "BUSINESS INFORMATION:",
        f"- Business Name: {data.org_name}",
        f"- Business Type: {data.org_type}",
        *_optional_line("Attender/Salesperson", data.attender_name),
        *_optional_line("Shop Location", data.shop_location),
        *_optional_line("Description", data.org_description),
        "",
        "CUSTOMER INFORMATION:",
        f"- Customer Name: {data.customer_name}",
        f"- Purchase Type: {data.purchase_type}",
        f"- Purchase Frequency: {data.purchase_frequency}",
        *_optional_line("Duration as Customer", data.purchase_duration),
        "",
        "EXPERIENCE DETAILS:",
        f"- Overall Satisfaction (1-10): {data.satisfaction_level}",
        *_optional_line("Occasion/Event", data.events),
        *_optional_line("Key Highlights", data.key_highlights),
        *_optional_line("Areas for Improvement", data.improvement_areas),
        f"- Likelihood to Recommend (1-10): {data.recommendation_likelihood}",
        "",
        "BEHAVIORAL INSIGHTS:",
        *_optional_line("Shopping Motivation", data.shopping_motivation),
        *_optional_line("Price Sensitivity", data.price_sensitivity),
        *_optional_line("Brand Loyalty", data.brand_loyalty),
        *_optional_line("Emotional Connection", data.emotional_connection),
        "",
        "REQUIREMENTS:",
        f"1. Write in first person as {data.customer_name}",
        "2. Make it sound natural and authentic (not overly promotional)",
        "3. Include specific details about the purchase experience",
        f"4. Mention {data.org_name} by name" + (" and the location" if data.shop_location else ""),
        "5. Keep it between 150-250 words",
        "6. Include both positive aspects and (if applicable) minor constructive feedback for credibility",
        "7. End with a clear recommendation statement",
        "8. Use conversational, friendly language",
        "",
        "Generate the review now:",
    ]
    return "\n".join(lines)


class ReviewGenerator:
    """
    Drafts a customer review from structured form data.

    USAGE:
        generator = ReviewGenerator(GeminiTextGenerator(settings.llm))
        result = generator.generate(ReviewGenerationInput(org_name="SKS Jewellery", ...))
        if result.success:
            print(result.review)
    """

    def __init__(self, text_generator: TextGenerator):
        self._text_generator = text_generator

    def is_configured(self) -> bool:
        return self._text_generator.is_configured()

    def generate(self, data: ReviewGenerationInput) -> GenerationResult:
        prompt = build_review_prompt(data)

        try:
            review = self._text_generator.generate(prompt).strip()
        except ReviewGenerationError as e:
            return GenerationResult(success=False, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in review generation: {e}")
            return GenerationResult(success=False, error="Failed to generate review")

        if not review:
            return GenerationResult(success=False, error="Failed to generate review")

        logger.info(f"Generated review for {data.customer_name} ({len(review)} chars)")
        return GenerationResult(success=True, review=review)

    def status(self) -> dict:
        if not self.is_configured():
            return {
                "configured": False,
                "message": "Google Gemini API not configured",
                "instructions": [
                    "1. Get API key from https://aistudio.google.com/app/apikey",
                    "2. Add GOOGLE_API_KEY=your_key to .env file",
                ],
            }
        return {"configured": True, "message": "Google Gemini API is configured"}
