"""
Request Schemas
===============

Pydantic models for the JSON API. Field names are snake_case in Python and
camelCase on the wire (the review form posts camelCase).
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..application.notifications import ReviewMessage
from ..infrastructure.config.shop import location_label
from ..infrastructure.llm import ReviewGenerationInput

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ReviewSubmissionBase(BaseModel):
    """Fields shared by both review submission routes."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    shop_name: str = Field(alias="shopName", min_length=2)
    shop_email: str = Field(alias="shopEmail", pattern=EMAIL_PATTERN)
    customer_name: str = Field(alias="customerName", min_length=2)
    customer_email: str = Field(alias="customerEmail", pattern=EMAIL_PATTERN)
    phone_number: str = Field(alias="phoneNumber", min_length=10)
    product_name: str = Field(alias="productName", min_length=2)
    rating: int = Field(ge=1, le=5)
    review_text: str = Field(alias="reviewText", min_length=20)

    def to_message(self) -> ReviewMessage:
        return ReviewMessage(
            phone_number=self.phone_number,
            customer_name=self.customer_name,
            review_text=self.review_text,
            shop_name=self.shop_name,
            product_name=self.product_name,
        )


class ReviewSubmission(ReviewSubmissionBase):
    """Multi-channel submission: at least one of SMS / WhatsApp."""

    send_sms: bool = Field(default=False, alias="sendSMS")
    send_whatsapp: bool = Field(default=False, alias="sendWhatsApp")

    @model_validator(mode="after")
    def check_channel_selected(self):
        if not (self.send_sms or self.send_whatsapp):
            raise ValueError("Select at least one notification method")
        return self


class WhatsAppRedirectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    review_id: Optional[Union[int, str]] = Field(default=None, alias="reviewId")


class GenerateReviewRequest(BaseModel):
    """Review generation form: organization, customer, purchase and psychology fields."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    # Required
    org_name: str = Field(alias="orgName", min_length=1)
    org_type: str = Field(alias="orgType", min_length=1)
    customer_name: str = Field(alias="customerName", min_length=1)
    purchase_type: str = Field(alias="purchaseType", min_length=1)
    purchase_frequency: str = Field(alias="purchaseFrequency", min_length=1)

    # Organization
    attender_name: Optional[str] = Field(default=None, alias="attenderName")
    shop_location: Optional[str] = Field(default=None, alias="shopLocation")
    org_description: Optional[str] = Field(default=None, alias="orgDescription")

    # Customer / purchase
    customer_phone: Optional[str] = Field(default=None, alias="customerPhone")
    purchase_duration: Optional[str] = Field(default=None, alias="purchaseDuration")

    # Experience
    satisfaction_level: int = Field(default=8, alias="satisfactionLevel")
    recommendation_likelihood: int = Field(default=9, alias="recommendationLikelihood")
    key_highlights: Optional[str] = Field(default=None, alias="keyHighlights")
    improvement_areas: Optional[str] = Field(default=None, alias="improvementAreas")
    events: Optional[str] = None

    # Psychology
    shopping_motivation: Optional[Union[List[str], str]] = Field(default=None, alias="shoppingMotivation")
    price_sensitivity: Optional[str] = Field(default=None, alias="priceSensitivity")
    brand_loyalty: Optional[str] = Field(default=None, alias="brandLoyalty")
    emotional_connection: Optional[str] = Field(default=None, alias="emotionalConnection")

    @field_validator("satisfaction_level", mode="before")
    @classmethod
    def default_satisfaction(cls, value):
        return _int_or_default(value, 8)

    @field_validator("recommendation_likelihood", mode="before")
    @classmethod
    def default_recommendation(cls, value):
        return _int_or_default(value, 9)

    def to_input(self) -> ReviewGenerationInput:
        motivation = self.shopping_motivation
        if isinstance(motivation, list):
            motivation = ", ".join(item for item in motivation if item)

        return ReviewGenerationInput(
            org_name=self.org_name,
            org_type=self.org_type,
            customer_name=self.customer_name,
            purchase_type=self.purchase_type,
            purchase_frequency=self.purchase_frequency,
            attender_name=self.attender_name,
            shop_location=location_label(self.shop_location),
            org_description=self.org_description,
            customer_phone=self.customer_phone,
            purchase_duration=self.purchase_duration,
            satisfaction_level=self.satisfaction_level,
            recommendation_likelihood=self.recommendation_likelihood,
            key_highlights=self.key_highlights,
            improvement_areas=self.improvement_areas,
            events=self.events,
            shopping_motivation=motivation or None,
            price_sensitivity=self.price_sensitivity,
            brand_loyalty=self.brand_loyalty,
            emotional_connection=self.emotional_connection,
        )


def _int_or_default(value, default: int) -> int:
    """Lenient integer parsing for form values ("7", 7, "", None)."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed or default
