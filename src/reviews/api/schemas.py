"""Pydantic request/response schemas for the Reviews API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    product: str = Field(min_length=1, max_length=255)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Sturdy and warm",
                    "content": "Survived a winter of daily use without a scratch.",
                    "rating": 5,
                    "product": "Enamel Camp Mug",
                }
            ]
        }
    }


class UsefulnessVoteRequest(BaseModel):
    review_id: str
    user_id: str = Field(min_length=1)
    action: str  # "like", "dislike" or "remove"


class TallyVoteRequest(BaseModel):
    vote_type: str  # "like" or "dislike"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReviewResponse(BaseModel):
    review_id: str
    title: str
    content: str
    rating: int
    product_name: str
    review_type: str | None = None
    thumbs_up: int = 0
    thumbs_down: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewListResponse(BaseModel):
    items: list[ReviewResponse]
    total: int
    limit: int
    offset: int


class VoteCountsResponse(BaseModel):
    thumbs_up: int
    thumbs_down: int


class ProductRatingResponse(BaseModel):
    product_name: str
    total_reviews: int
    average_rating: float
    total_thumbs_up: int
    total_thumbs_down: int
