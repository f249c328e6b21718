"""FastAPI routes for the Reviews bounded context.

Each route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts). Reads are served from the
ReviewDetail and ProductRating projections.
"""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from reviews.api.schemas import (
    ProductRatingResponse,
    ReviewListResponse,
    ReviewResponse,
    SubmitReviewRequest,
    TallyVoteRequest,
    UsefulnessVoteRequest,
    VoteCountsResponse,
)
from reviews.projections.product_rating import ProductRating
from reviews.projections.review_detail import ReviewDetail
from reviews.review.concurrency import process_with_retry
from reviews.review.submission import SubmitReview
from reviews.review.tally import IncrementTally
from reviews.review.usefulness import CastUsefulnessVote

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _to_response(detail: ReviewDetail) -> ReviewResponse:
    return ReviewResponse(
        review_id=str(detail.review_id),
        title=detail.title,
        content=detail.content,
        rating=detail.rating,
        product_name=detail.product_name,
        review_type=detail.review_type,
        thumbs_up=detail.thumbs_up,
        thumbs_down=detail.thumbs_down,
        created_at=detail.created_at,
        updated_at=detail.updated_at,
    )


@review_router.get("", response_model=ReviewListResponse)
async def list_reviews(
    product: str | None = None,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ReviewListResponse:
    """List reviews, newest first, optionally for a single product."""
    query = current_domain.repository_for(ReviewDetail)._dao.query
    if product:
        query = query.filter(product_name=product)
    results = query.order_by("-created_at").offset(offset).limit(limit).all()
    return ReviewListResponse(
        items=[_to_response(item) for item in results.items],
        total=results.total,
        limit=limit,
        offset=offset,
    )


@review_router.post("", status_code=201, response_model=ReviewResponse)
async def submit_review(body: SubmitReviewRequest) -> ReviewResponse:
    """Submit a new product review."""
    command = SubmitReview(
        title=body.title,
        content=body.content,
        rating=body.rating,
        product_name=body.product,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return _to_response(current_domain.repository_for(ReviewDetail).get(review_id))


@review_router.post("/usefulness", response_model=VoteCountsResponse)
async def cast_usefulness_vote(body: UsefulnessVoteRequest) -> VoteCountsResponse:
    """Like, dislike, or withdraw a vote on a review (one vote per user)."""
    command = CastUsefulnessVote(
        review_id=body.review_id,
        user_id=body.user_id,
        action=body.action,
    )
    counts = process_with_retry(command)
    return VoteCountsResponse(**counts)


@review_router.get("/products/{product_name}/rating", response_model=ProductRatingResponse)
async def get_product_rating(product_name: str) -> ProductRatingResponse:
    """Rating and usefulness totals for one product."""
    pr = current_domain.repository_for(ProductRating).get(product_name)
    return ProductRatingResponse(
        product_name=str(pr.product_name),
        total_reviews=pr.total_reviews,
        average_rating=pr.average_rating,
        total_thumbs_up=pr.total_thumbs_up,
        total_thumbs_down=pr.total_thumbs_down,
    )


@review_router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: str) -> ReviewResponse:
    """Fetch a single review."""
    return _to_response(current_domain.repository_for(ReviewDetail).get(review_id))


@review_router.post("/{review_id}/vote", response_model=VoteCountsResponse)
async def increment_tally(review_id: str, body: TallyVoteRequest) -> VoteCountsResponse:
    """Add a like/dislike to the counters without recording who voted."""
    command = IncrementTally(review_id=review_id, vote_type=body.vote_type)
    counts = process_with_retry(command)
    return VoteCountsResponse(**counts)
