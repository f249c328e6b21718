"""ProductRating — review count, average rating and usefulness totals per product."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted, TallyIncremented, UsefulnessVoteCast
from reviews.review.review import Review


@reviews.projection
class ProductRating:
    product_name = Identifier(identifier=True, required=True)
    total_reviews = Integer(default=0)
    rating_sum = Integer(default=0)
    average_rating = Float(default=0.0)
    total_thumbs_up = Integer(default=0)
    total_thumbs_down = Integer(default=0)
    updated_at = DateTime()


def _recalculate_average(rating_sum, total):
    if total == 0:
        return 0.0
    return round(rating_sum / total, 2)


@reviews.projector(projector_for=ProductRating, aggregates=[Review])
class ProductRatingProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        repo = current_domain.repository_for(ProductRating)

        try:
            pr = repo.get(event.product_name)
        except ObjectNotFoundError:
            pr = ProductRating(
                product_name=event.product_name,
                total_reviews=0,
                rating_sum=0,
                total_thumbs_up=0,
                total_thumbs_down=0,
            )

        pr.total_reviews = pr.total_reviews + 1
        pr.rating_sum = pr.rating_sum + event.rating
        pr.average_rating = _recalculate_average(pr.rating_sum, pr.total_reviews)
        pr.updated_at = event.submitted_at

        repo.add(pr)

    def _apply_thumbs(self, product_name, up_delta, down_delta, updated_at):
        repo = current_domain.repository_for(ProductRating)
        try:
            pr = repo.get(product_name)
        except ObjectNotFoundError:
            return

        pr.total_thumbs_up = max(0, pr.total_thumbs_up + up_delta)
        pr.total_thumbs_down = max(0, pr.total_thumbs_down + down_delta)
        pr.updated_at = updated_at
        repo.add(pr)

    @on(UsefulnessVoteCast)
    def on_usefulness_vote_cast(self, event):
        self._apply_thumbs(
            event.product_name,
            event.thumbs_up_delta,
            event.thumbs_down_delta,
            event.voted_at,
        )

    @on(TallyIncremented)
    def on_tally_incremented(self, event):
        up, down = (1, 0) if event.vote_type == "like" else (0, 1)
        self._apply_thumbs(event.product_name, up, down, event.incremented_at)
