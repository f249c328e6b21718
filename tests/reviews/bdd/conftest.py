"""Shared BDD fixtures and step definitions for the Reviews domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from reviews.review.ledger import InvalidVoteAction, NothingToRemove
from reviews.review.review import Review


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a submitted review of "{product_name}"'), target_fixture="review")
def submitted_review(product_name):
    review = Review.submit(
        title="BDD Test Review",
        content="A review body written for the scenarios.",
        rating=4,
        product_name=product_name,
    )
    review._events.clear()
    return review


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the review shows {thumbs_up:d} thumbs up and {thumbs_down:d} thumbs down"))
def review_shows_counts(review, thumbs_up, thumbs_down):
    assert review.thumbs_up == thumbs_up
    assert review.thumbs_down == thumbs_down


@then(parsers.cfparse('user "{user_id}" holds no vote'))
def user_holds_no_vote(review, user_id):
    assert review.vote_of(user_id) is None


@then("the vote is rejected because there is nothing to remove")
def rejected_nothing_to_remove(error):
    assert isinstance(error["exc"], NothingToRemove)


@then("the vote is rejected as invalid")
def rejected_invalid(error):
    assert isinstance(error["exc"], InvalidVoteAction)
    assert isinstance(error["exc"], ValidationError)
