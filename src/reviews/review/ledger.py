"""Vote Ledger — usefulness-vote transitions for a single user on a single review.

Pure computation: given the user's recorded vote (or None) and the requested
action, returns the user's new vote and the counter deltas to apply.

Transition table:

    state \\ action | like              | dislike           | remove
    ----------------+-------------------+-------------------+------------------
    none            | like     (+1, 0)  | dislike  (0, +1)  | NothingToRemove
    like            | none     (-1, 0)  | dislike  (-1, +1) | none     (-1, 0)
    dislike         | like     (+1, -1) | none     (0, -1)  | none     (0, -1)

Re-submitting the vote already held toggles it off; submitting the opposite
vote switches buckets.
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError


class VoteState(Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class VoteAction(Enum):
    LIKE = "like"
    DISLIKE = "dislike"
    REMOVE = "remove"


class InvalidVoteAction(ValidationError):
    """The requested action or vote type is not a recognized literal."""


class NothingToRemove(ValidationError):
    """A `remove` was requested by a user who holds no vote."""


class UnrecognizedRecordedVote(ValidationError):
    """The vote stored for a user is neither like nor dislike."""


@dataclass(frozen=True)
class VoteOutcome:
    new_vote: str | None
    thumbs_up_delta: int = 0
    thumbs_down_delta: int = 0


# (thumbs_up, thumbs_down) contribution of each recorded vote
_CONTRIBUTION = {
    VoteState.LIKE: (1, 0),
    VoteState.DISLIKE: (0, 1),
}


def parse_action(value) -> VoteAction:
    try:
        return VoteAction(value)
    except ValueError:
        raise InvalidVoteAction({"action": [f"Invalid vote action: {value!r}"]}) from None


def parse_vote_type(value) -> VoteState:
    try:
        return VoteState(value)
    except ValueError:
        raise InvalidVoteAction({"vote_type": [f"Invalid vote type: {value!r}"]}) from None


def parse_recorded_vote(value) -> VoteState | None:
    if not value:
        return None
    try:
        return VoteState(value)
    except ValueError:
        raise UnrecognizedRecordedVote({"user_votes": [f"Unrecognized recorded vote: {value!r}"]}) from None


def _retract(current: VoteState) -> VoteOutcome:
    up, down = _CONTRIBUTION[current]
    return VoteOutcome(new_vote=None, thumbs_up_delta=-up, thumbs_down_delta=-down)


def apply_vote(current_vote: str | None, requested_action: str) -> VoteOutcome:
    """Compute the new vote and counter deltas for one requested action.

    Raises:
        InvalidVoteAction: `requested_action` is not like/dislike/remove.
        NothingToRemove: `remove` requested with no recorded vote.
        UnrecognizedRecordedVote: `current_vote` is not like/dislike.
    """
    action = parse_action(requested_action)
    current = parse_recorded_vote(current_vote)

    if action is VoteAction.REMOVE:
        if current is None:
            raise NothingToRemove({"vote": ["No vote to remove"]})
        return _retract(current)

    requested = VoteState(action.value)
    if current is requested:
        return _retract(current)

    up, down = _CONTRIBUTION[requested]
    if current is not None:
        old_up, old_down = _CONTRIBUTION[current]
        up, down = up - old_up, down - old_down

    return VoteOutcome(new_vote=requested.value, thumbs_up_delta=up, thumbs_down_delta=down)
