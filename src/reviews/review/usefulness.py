"""CastUsefulnessVote — audited per-user like/dislike/remove on a review.

Re-submitting the same vote withdraws it, the opposite vote switches it,
and `remove` withdraws whatever the user holds.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.review import Review


@reviews.command(part_of="Review")
class CastUsefulnessVote:
    review_id = Identifier(required=True)
    user_id = String(required=True, max_length=255)
    action = String(required=True, max_length=20)  # "like", "dislike" or "remove"


@reviews.command_handler(part_of=Review)
class CastUsefulnessVoteHandler:
    @handle(CastUsefulnessVote)
    def cast_usefulness_vote(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.cast_usefulness_vote(user_id=command.user_id, action=command.action)

        repo.add(review)
        return {"thumbs_up": review.thumbs_up, "thumbs_down": review.thumbs_down}
