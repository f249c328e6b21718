"""Review aggregate (CQRS) — the core of the Reviews domain.

A Review is submitted once and is never edited in place. The only
mutations after submission are to its usefulness counters:

- cast_usefulness_vote: audited per-user like/dislike/remove, driven by
  the Vote Ledger. Keeps `user_votes` and the counters in step.
- increment_tally: un-audited +1 on one counter. No per-user bookkeeping,
  no duplicate protection.

Because increment_tally bypasses `user_votes`, the counters can exceed the
number of recorded votes but can never fall below it.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Dict, Integer, String, Text, ValueObject

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted, TallyIncremented, UsefulnessVoteCast
from reviews.review.ledger import VoteOutcome, VoteState, apply_vote, parse_vote_type

DEFAULT_REVIEW_TYPE = "product"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@reviews.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"score": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    """A shopper's review of a product, with usefulness votes from other shoppers."""

    # Content
    title = String(required=True, max_length=200)
    content = Text(required=True)
    rating = ValueObject(Rating, required=True)
    product_name = String(required=True, max_length=255)
    review_type = String(max_length=50, default=DEFAULT_REVIEW_TYPE)

    # Usefulness
    thumbs_up = Integer(default=0, min_value=0)
    thumbs_down = Integer(default=0, min_value=0)
    user_votes = Dict()  # user id -> "like" | "dislike"

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def title_must_not_be_empty(self):
        if self.title is not None and len(self.title.strip()) == 0:
            raise ValidationError({"title": ["Review title cannot be empty"]})

    @invariant.post
    def content_must_not_be_empty(self):
        if self.content is not None and len(self.content.strip()) == 0:
            raise ValidationError({"content": ["Review content cannot be empty"]})

    @invariant.post
    def counters_cover_recorded_votes(self):
        votes = list((self.user_votes or {}).values())
        likes = votes.count(VoteState.LIKE.value)
        dislikes = votes.count(VoteState.DISLIKE.value)
        if (self.thumbs_up or 0) < likes or (self.thumbs_down or 0) < dislikes:
            raise ValidationError({"votes": ["Vote counters cannot fall below the recorded user votes"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(cls, title, content, rating, product_name, review_type=DEFAULT_REVIEW_TYPE):
        """Submit a new review with zeroed counters."""
        now = datetime.now(UTC)

        review = cls(
            title=title,
            content=content,
            rating=Rating(score=rating),
            product_name=product_name,
            review_type=review_type,
            thumbs_up=0,
            thumbs_down=0,
            user_votes={},
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_name=product_name,
                review_type=review_type,
                rating=rating,
                title=title,
                content=content,
                submitted_at=now,
            )
        )

        return review

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def vote_of(self, user_id) -> str | None:
        """Return the user's recorded vote, or None."""
        return (self.user_votes or {}).get(str(user_id))

    # -------------------------------------------------------------------
    # Usefulness voting
    # -------------------------------------------------------------------
    def cast_usefulness_vote(self, user_id, action) -> VoteOutcome:
        """Apply a like/dislike/remove from one user through the Vote Ledger.

        Raises InvalidVoteAction or NothingToRemove without touching state.
        """
        user_id = str(user_id)
        outcome = apply_vote(self.vote_of(user_id), action)

        votes = dict(self.user_votes or {})
        if outcome.new_vote is None:
            votes.pop(user_id, None)
        else:
            votes[user_id] = outcome.new_vote

        now = datetime.now(UTC)
        with atomic_change(self):
            self.thumbs_up = self.thumbs_up + outcome.thumbs_up_delta
            self.thumbs_down = self.thumbs_down + outcome.thumbs_down_delta
            self.user_votes = votes
            self.updated_at = now

        self.raise_(
            UsefulnessVoteCast(
                review_id=str(self.id),
                product_name=self.product_name,
                user_id=user_id,
                action=action,
                vote=outcome.new_vote,
                thumbs_up_delta=outcome.thumbs_up_delta,
                thumbs_down_delta=outcome.thumbs_down_delta,
                thumbs_up=self.thumbs_up,
                thumbs_down=self.thumbs_down,
                voted_at=now,
            )
        )

        return outcome

    def increment_tally(self, vote_type):
        """Add one like or dislike to the counters, bypassing per-user votes."""
        state = parse_vote_type(vote_type)

        now = datetime.now(UTC)
        with atomic_change(self):
            if state is VoteState.LIKE:
                self.thumbs_up = self.thumbs_up + 1
            else:
                self.thumbs_down = self.thumbs_down + 1
            self.updated_at = now

        self.raise_(
            TallyIncremented(
                review_id=str(self.id),
                product_name=self.product_name,
                vote_type=state.value,
                thumbs_up=self.thumbs_up,
                thumbs_down=self.thumbs_down,
                incremented_at=now,
            )
        )
