"""Shared BDD fixtures and step definitions for the review flow."""

import asyncio

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from reviews.review.lookup import review_for_transaction
from reviews.review.submission import SubmitReview
from reviews.workflow.errors import ReviewFlowError
from reviews.workflow.flow import Reviewer


@pytest.fixture()
def outcome():
    """Container for the last step's result or captured flow error."""
    return {"result": None, "error": None}


def _run(outcome, action):
    try:
        result = action()
        if asyncio.iscoroutine(result):
            result = asyncio.run(result)
        outcome["result"] = result
        outcome["error"] = None
    except ReviewFlowError as exc:
        outcome["result"] = None
        outcome["error"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the store has a payment "{transaction_id}" for "{product_name}"'))
def store_has_payment(gateway, make_payment, transaction_id, product_name):
    gateway.add_payment(make_payment(transaction_id, packages=[{"id": 7, "name": product_name}]))


@given(parsers.cfparse('transaction "{transaction_id}" has already been reviewed'))
def transaction_already_reviewed(review_fields, transaction_id):
    current_domain.process(
        SubmitReview(**review_fields(transaction_id=transaction_id, user_id="9999")),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('user "{user_id}" submits transaction "{transaction_id}"'))
def submit_transaction(workflow, outcome, user_id, transaction_id):
    _run(outcome, lambda: workflow.submit_transaction(user_id, transaction_id))


@when(parsers.cfparse('user "{user_id}" opens the review form'))
def open_review_form(workflow, outcome, user_id):
    _run(outcome, lambda: workflow.open_review_form(user_id))


@when(parsers.cfparse('user "{user_id}" submits the review "{review_text}" with rating "{rating}"'))
def submit_review(workflow, outcome, user_id, review_text, rating):
    reviewer = Reviewer(user_id=user_id, name=f"user-{user_id}")
    _run(outcome, lambda: workflow.submit_review(reviewer, "VIP Rank", review_text, rating))


@when(parsers.cfparse("{seconds:d} seconds pass"))
def time_passes(clock, seconds):
    clock.advance(seconds)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the review is published")
def review_published(outcome, announcer):
    assert outcome["error"] is None, f"Flow failed: {outcome['error']!r}"
    assert outcome["result"].message_id in announcer.published


@then(parsers.cfparse('a review is stored for transaction "{transaction_id}" with rating {rating:d}'))
def review_stored(transaction_id, rating):
    review = review_for_transaction(transaction_id)
    assert review is not None
    assert review.rating.score == rating


@then(parsers.cfparse('the flow fails with "{title}"'))
def flow_fails(outcome, title):
    assert outcome["error"] is not None, "Expected the flow to fail"
    assert outcome["error"].title == title


@then("the store was not contacted")
def store_not_contacted(gateway):
    assert gateway.calls == []


@then("nothing is announced")
def nothing_announced(announcer):
    assert announcer.published == {}


@then(parsers.cfparse('user "{user_id}" has no review session'))
def no_session(sessions, user_id):
    assert sessions.get(user_id) is None


@then(parsers.cfparse('user "{user_id}" still has a review session'))
def session_kept(sessions, user_id):
    assert sessions.get(user_id) is not None
