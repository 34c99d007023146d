"""
Unit tests for the resource models.
"""

import pytest

from api_automation.models import Comment, Post, User


pytestmark = pytest.mark.unit

USER_PAYLOAD = {
    "id": 1,
    "name": "Leanne Graham",
    "username": "Bret",
    "email": "Sincere@april.biz",
    "address": {
        "street": "Kulas Light",
        "suite": "Apt. 556",
        "city": "Gwenborough",
        "zipcode": "92998-3874",
        "geo": {"lat": "-37.3159", "lng": "81.1496"},
    },
    "phone": "1-770-736-8031 x56442",
    "website": "hildegard.org",
    "company": {
        "name": "Romaguera-Crona",
        "catchPhrase": "Multi-layered client-server neural-net",
        "bs": "harness real-time e-markets",
    },
}


def test_post_maps_camel_case_user_id():
    # Arrange
    payload = {"id": 1, "userId": 3, "title": "hello", "body": "world"}

    # Act
    post = Post.from_dict(payload)

    # Assert
    assert post.user_id == 3
    assert post.to_dict() == payload


def test_comment_maps_post_id():
    comment = Comment.from_dict({"id": 2, "postId": 1, "name": "n", "email": "e@x.io", "body": "b"})

    assert comment.post_id == 1
    assert comment.to_dict()["postId"] == 1


def test_user_parses_nested_objects():
    user = User.from_dict(USER_PAYLOAD)

    assert user.address.city == "Gwenborough"
    assert user.address.geo.latitude == "-37.3159"
    assert user.company.catch_phrase == "Multi-layered client-server neural-net"
    assert user.to_dict() == USER_PAYLOAD


def test_unknown_keys_are_ignored():
    post = Post.from_dict({"id": 1, "title": "t", "body": "b", "userId": 1, "tags": ["x"]})

    assert "tags" not in post.to_dict()


def test_user_without_nested_objects():
    user = User.from_dict({"id": 5, "name": "Ann", "username": "ann", "email": "ann@example.com"})

    assert user.address is None
    assert user.company is None
    assert repr(user) == "<User 5: ann>"
