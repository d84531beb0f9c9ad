from .review_generator import (
    GeminiTextGenerator,
    GenerationResult,
    ReviewGenerationError,
    ReviewGenerationInput,
    ReviewGenerator,
    build_review_prompt,
)

__all__ = [
    "GeminiTextGenerator",
    "GenerationResult",
    "ReviewGenerationError",
    "ReviewGenerationInput",
    "ReviewGenerator",
    "build_review_prompt",
]
