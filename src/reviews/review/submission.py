"""SubmitReview — submit a new product review."""

from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.review import DEFAULT_REVIEW_TYPE, Review


@reviews.command(part_of="Review")
class SubmitReview:
    title = String(required=True, max_length=200)
    content = Text(required=True)
    rating = Integer(required=True)
    product_name = String(required=True, max_length=255)
    review_type = String(max_length=50, default=DEFAULT_REVIEW_TYPE)


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        review = Review.submit(
            title=command.title,
            content=command.content,
            rating=command.rating,
            product_name=command.product_name,
            review_type=command.review_type or DEFAULT_REVIEW_TYPE,
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)
