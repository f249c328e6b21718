"""ReviewDetail — one row per review, the source for review listings."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted, TallyIncremented, UsefulnessVoteCast
from reviews.review.review import Review


@reviews.projection
class ReviewDetail:
    review_id = Identifier(identifier=True, required=True)
    product_name = String(required=True, max_length=255)
    review_type = String(max_length=50)
    rating = Integer(required=True)
    title = String(required=True, max_length=200)
    content = Text(required=True)
    thumbs_up = Integer(default=0)
    thumbs_down = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()


@reviews.projector(projector_for=ReviewDetail, aggregates=[Review])
class ReviewDetailProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        current_domain.repository_for(ReviewDetail).add(
            ReviewDetail(
                review_id=event.review_id,
                product_name=event.product_name,
                review_type=event.review_type,
                rating=event.rating,
                title=event.title,
                content=event.content,
                thumbs_up=0,
                thumbs_down=0,
                created_at=event.submitted_at,
                updated_at=event.submitted_at,
            )
        )

    def _update_counters(self, review_id, thumbs_up, thumbs_down, updated_at):
        repo = current_domain.repository_for(ReviewDetail)
        try:
            rd = repo.get(review_id)
        except ObjectNotFoundError:
            return
        rd.thumbs_up = thumbs_up
        rd.thumbs_down = thumbs_down
        rd.updated_at = updated_at
        repo.add(rd)

    @on(UsefulnessVoteCast)
    def on_usefulness_vote_cast(self, event):
        self._update_counters(event.review_id, event.thumbs_up, event.thumbs_down, event.voted_at)

    @on(TallyIncremented)
    def on_tally_incremented(self, event):
        self._update_counters(event.review_id, event.thumbs_up, event.thumbs_down, event.incremented_at)
