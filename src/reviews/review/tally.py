"""IncrementTally — add a like/dislike to a review's counters.

Un-audited: no per-user record, no duplicate protection, no toggling.
Independent of CastUsefulnessVote.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.review import Review


@reviews.command(part_of="Review")
class IncrementTally:
    review_id = Identifier(required=True)
    vote_type = String(required=True, max_length=20)  # "like" or "dislike"


@reviews.command_handler(part_of=Review)
class IncrementTallyHandler:
    @handle(IncrementTally)
    def increment_tally(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.increment_tally(command.vote_type)

        repo.add(review)
        return {"thumbs_up": review.thumbs_up, "thumbs_down": review.thumbs_down}
