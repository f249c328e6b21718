"""Domain events for the Review aggregate.

Versioned facts about a review. Projectors consume them to keep the
ReviewDetail and ProductRating read models current.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewSubmitted:
    """A shopper submitted a new product review."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_name = String(required=True)
    review_type = String(required=True)
    rating = Integer(required=True)
    title = String(required=True)
    content = Text(required=True)
    submitted_at = DateTime(required=True)


@reviews.event(part_of="Review")
class UsefulnessVoteCast:
    """A user liked, disliked, or withdrew their vote on a review.

    `vote` is the user's vote after the action (None when withdrawn).
    """

    __version__ = 1

    review_id = Identifier(required=True)
    product_name = String(required=True)
    user_id = String(required=True)
    action = String(required=True)
    vote = String()
    thumbs_up_delta = Integer(required=True)
    thumbs_down_delta = Integer(required=True)
    thumbs_up = Integer(required=True)
    thumbs_down = Integer(required=True)
    voted_at = DateTime(required=True)


@reviews.event(part_of="Review")
class TallyIncremented:
    """A like/dislike was added to the counters without per-user bookkeeping."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_name = String(required=True)
    vote_type = String(required=True)
    thumbs_up = Integer(required=True)
    thumbs_down = Integer(required=True)
    incremented_at = DateTime(required=True)
