"""
Response and model validation helpers.

Each helper raises :class:`AssertionError` with a descriptive message on
the first violated expectation, so it can be called directly from a
pytest test body and produce a readable failure.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import requests

from api_automation.log_utils import log_performance_metric, log_validation_pass
from api_automation.models import Comment, Post, User
from api_automation.services.base import response_time_ms

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESPONSE_MS = 5000

# Fraction of the response-time budget after which a warning is logged.
APPROACHING_LIMIT_RATIO = 0.8


def _require(condition: object, message: str) -> None:
    # Explicit raise so the checks survive ``python -O``.
    if not condition:
        raise AssertionError(message)


def validate_success_response(
    response: requests.Response,
    expected_status_code: int,
    max_response_ms: int = DEFAULT_MAX_RESPONSE_MS,
) -> None:
    """Check the status code and that the response arrived within *max_response_ms*."""
    _require(
        response.status_code == expected_status_code,
        f"Status code should be {expected_status_code}, got {response.status_code}",
    )
    log_validation_pass("Status code validation", expected_status_code, response.status_code)

    elapsed = response_time_ms(response)
    _require(
        elapsed < max_response_ms,
        f"Response time should be less than {max_response_ms}ms, got {elapsed}ms",
    )
    log_validation_pass("Response time validation", f"< {max_response_ms}ms", f"{elapsed}ms")


def validate_error_response(
    response: requests.Response,
    expected_status_code: int,
    expected_message: str | None = None,
) -> None:
    _require(
        response.status_code == expected_status_code,
        f"Status code should be {expected_status_code}, got {response.status_code}",
    )
    if expected_message is not None:
        _require(
            expected_message in response.text,
            f"Response should contain expected error message: {expected_message!r}",
        )
        log_validation_pass("Error message validation", f"contains: {expected_message}", "found")


def validate_user(user: User | None) -> None:
    _require(user is not None, "User should not be null")
    _require(user.id is not None, "User ID should not be null")
    _require(user.name is not None, "User name should not be null")
    _require(user.username is not None, "User username should not be null")
    _require(user.email is not None, "User email should not be null")
    _require("@" in user.email, "Email should contain @ symbol")
    _require("." in user.email, "Email should contain domain")
    log_validation_pass("User object validation", "all required fields present", "validated")


def validate_user_structure(user: User | None) -> None:
    """Run :func:`validate_user` and additionally check nested objects when present."""
    validate_user(user)

    if user.address is not None:
        _require(user.address.city is not None, "Address city should not be null")
        _require(user.address.zipcode is not None, "Address zipcode should not be null")
        log_validation_pass("User address validation", "not null", "validated")

    if user.company is not None:
        _require(user.company.name is not None, "Company name should not be null")
        log_validation_pass("User company validation", "not null", "validated")


def validate_post(post: Post | None) -> None:
    _require(post is not None, "Post should not be null")
    _require(post.id is not None, "Post ID should not be null")
    _require(post.title is not None, "Post title should not be null")
    _require(post.body is not None, "Post body should not be null")
    _require(post.user_id is not None, "Post userId should not be null")
    _require(post.title.strip(), "Post title should not be empty")
    _require(post.body.strip(), "Post body should not be empty")
    log_validation_pass("Post object validation", "all required fields present", "validated")


def validate_comment(comment: Comment | None) -> None:
    _require(comment is not None, "Comment should not be null")
    _require(comment.id is not None, "Comment ID should not be null")
    _require(comment.name is not None, "Comment name should not be null")
    _require(comment.email is not None, "Comment email should not be null")
    _require(comment.body is not None, "Comment body should not be null")
    _require(comment.post_id is not None, "Comment postId should not be null")
    _require("@" in comment.email, "Comment email should contain @ symbol")
    log_validation_pass("Comment object validation", "all required fields present", "validated")


def validate_performance(response: requests.Response, max_response_ms: int) -> None:
    """
    Assert the response stayed within a latency budget.

    Logs a warning once the measured time passes 80% of the budget so
    creeping regressions show up in CI logs before they fail the build.
    """
    actual = response_time_ms(response)
    _require(
        actual <= max_response_ms,
        f"Response time {actual}ms should not exceed {max_response_ms}ms",
    )
    log_performance_metric("Response Time", actual, "ms")

    if actual > max_response_ms * APPROACHING_LIMIT_RATIO:
        logger.warning(
            "Response time %sms is approaching the limit of %sms", actual, max_response_ms
        )


def validate_list_not_empty(items: Sequence | None, list_name: str) -> None:
    _require(items is not None, f"{list_name} should not be null")
    _require(len(items) > 0, f"{list_name} should not be empty")
    log_validation_pass(f"{list_name} size validation", "> 0", len(items))


def validate_user_post_relationship(user: User | None, posts: Sequence[Post] | None) -> None:
    _require(user is not None, "User should not be null")
    _require(posts is not None, "Posts list should not be null")
    for post in posts:
        _require(
            post.user_id == user.id,
            f"All posts should belong to the user: post {post.id} has userId {post.user_id}",
        )
    log_validation_pass("User-Post relationship", "all posts belong to user", "validated")


def validate_post_comment_relationship(post: Post | None, comments: Sequence[Comment] | None) -> None:
    _require(post is not None, "Post should not be null")
    _require(comments is not None, "Comments list should not be null")
    for comment in comments:
        _require(
            comment.post_id == post.id,
            f"All comments should belong to the post: comment {comment.id} has postId {comment.post_id}",
        )
    log_validation_pass("Post-Comment relationship", "all comments belong to post", "validated")
