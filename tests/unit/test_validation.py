"""
Unit tests for the response and model validation helpers.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from api_automation.models import Address, Comment, Company, Post, User
from api_automation.utils import validation


pytestmark = pytest.mark.unit


def _response(status_code=200, elapsed_ms=120, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.elapsed = timedelta(milliseconds=elapsed_ms)
    response.text = text
    return response


@pytest.fixture
def user():
    return User(
        id=1,
        name="Leanne Graham",
        username="Bret",
        email="Sincere@april.biz",
        address=Address(city="Gwenborough", zipcode="92998-3874"),
        company=Company(name="Romaguera-Crona"),
    )


def test_success_response_passes():
    validation.validate_success_response(_response(200, 150), 200)


def test_success_response_wrong_status():
    with pytest.raises(AssertionError, match="Status code should be 200, got 404"):
        validation.validate_success_response(_response(404), 200)


def test_success_response_too_slow():
    with pytest.raises(AssertionError, match="less than 5000ms"):
        validation.validate_success_response(_response(200, 6000), 200)


def test_error_response_checks_message():
    response = _response(404, text='{"error": "Post not found"}')

    validation.validate_error_response(response, 404, "Post not found")
    with pytest.raises(AssertionError, match="expected error message"):
        validation.validate_error_response(response, 404, "User not found")


def test_user_validators(user):
    validation.validate_user(user)
    validation.validate_user_structure(user)


def test_user_without_email_domain_fails(user):
    user.email = "bret@localhost"

    with pytest.raises(AssertionError, match="Email should contain domain"):
        validation.validate_user(user)


def test_user_structure_checks_nested_address(user):
    user.address.zipcode = None

    with pytest.raises(AssertionError, match="Address zipcode"):
        validation.validate_user_structure(user)


def test_post_validator_rejects_blank_title():
    validation.validate_post(Post(id=1, title="t", body="b", user_id=1))

    with pytest.raises(AssertionError, match="Post title should not be empty"):
        validation.validate_post(Post(id=1, title="  ", body="b", user_id=1))


def test_comment_validator():
    validation.validate_comment(Comment(id=1, name="n", email="a@b.c", body="b", post_id=1))

    with pytest.raises(AssertionError, match="Comment postId"):
        validation.validate_comment(Comment(id=1, name="n", email="a@b.c", body="b"))


def test_performance_budget_warns_when_close(caplog):
    validation.validate_performance(_response(elapsed_ms=900), 1000)

    assert "approaching the limit" in caplog.text


def test_performance_budget_exceeded():
    with pytest.raises(AssertionError, match="should not exceed 1000ms"):
        validation.validate_performance(_response(elapsed_ms=1200), 1000)


def test_list_not_empty():
    validation.validate_list_not_empty([1], "Posts")

    with pytest.raises(AssertionError, match="Posts should not be empty"):
        validation.validate_list_not_empty([], "Posts")


def test_relationships(user):
    posts = [Post(id=1, user_id=1), Post(id=2, user_id=1)]
    comments = [Comment(id=5, post_id=1)]

    validation.validate_user_post_relationship(user, posts)
    validation.validate_post_comment_relationship(posts[0], comments)

    with pytest.raises(AssertionError, match="post 3 has userId 2"):
        validation.validate_user_post_relationship(user, posts + [Post(id=3, user_id=2)])
    with pytest.raises(AssertionError, match="comment 5 has postId 1"):
        validation.validate_post_comment_relationship(posts[1], comments)
