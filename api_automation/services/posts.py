"""Client for the ``/posts`` resource and its nested comments."""

from __future__ import annotations

import logging

import requests

from api_automation.models import Comment, Post
from api_automation.services.base import ApiError, BaseService

logger = logging.getLogger(__name__)

POSTS_ENDPOINT = "/posts"


class PostService(BaseService):
    """CRUD operations on posts plus the post-comments and posts-by-user views."""

    def get_all_posts(self) -> requests.Response:
        logger.info("Getting all posts")
        return self.get(POSTS_ENDPOINT)

    def get_all_posts_as_objects(self) -> list[Post]:
        data = self.parse_json(self.get_all_posts(), "posts")
        return _as_list(data, Post.from_dict, "posts")

    def get_post_by_id(self, post_id: int) -> requests.Response:
        logger.info("Getting post with ID: %s", post_id)
        return self.get(f"{POSTS_ENDPOINT}/{post_id}")

    def get_post_by_id_as_object(self, post_id: int) -> Post:
        return Post.from_dict(self.parse_json(self.get_post_by_id(post_id), "post"))

    def create_post(self, post: Post | dict) -> requests.Response:
        body = post.to_dict() if isinstance(post, Post) else post
        logger.info("Creating new post: %s", body.get("title"))
        return self.post(POSTS_ENDPOINT, body)

    def create_post_and_return(self, post: Post | dict) -> Post:
        return Post.from_dict(self.parse_json(self.create_post(post), "created post"))

    def update_post(self, post_id: int, post: Post | dict) -> requests.Response:
        logger.info("Updating post with ID: %s", post_id)
        body = post.to_dict() if isinstance(post, Post) else post
        return self.put(f"{POSTS_ENDPOINT}/{post_id}", body)

    def delete_post(self, post_id: int) -> requests.Response:
        logger.info("Deleting post with ID: %s", post_id)
        return self.delete(f"{POSTS_ENDPOINT}/{post_id}")

    def get_post_comments(self, post_id: int) -> requests.Response:
        logger.info("Getting comments for post ID: %s", post_id)
        return self.get(f"{POSTS_ENDPOINT}/{post_id}/comments")

    def get_post_comments_as_objects(self, post_id: int) -> list[Comment]:
        data = self.parse_json(self.get_post_comments(post_id), "comments")
        return _as_list(data, Comment.from_dict, "comments")

    def get_posts_by_user_id(self, user_id: int) -> requests.Response:
        logger.info("Getting posts for user ID: %s", user_id)
        return self.get(POSTS_ENDPOINT, params={"userId": user_id})

    def get_posts_by_user_id_as_objects(self, user_id: int) -> list[Post]:
        data = self.parse_json(self.get_posts_by_user_id(user_id), "posts")
        return _as_list(data, Post.from_dict, "posts")


def _as_list(data, factory, what: str) -> list:
    if not isinstance(data, list):
        raise ApiError(f"Expected a JSON list of {what}, got {type(data).__name__}")
    return [factory(item) for item in data if isinstance(item, dict)]
