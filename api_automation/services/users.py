"""Client for the ``/users`` resource."""

from __future__ import annotations

import logging

import requests

from api_automation.models import User
from api_automation.services.base import ApiError, BaseService

logger = logging.getLogger(__name__)

USERS_ENDPOINT = "/users"


class UserService(BaseService):
    """CRUD operations on users."""

    def get_all_users(self) -> requests.Response:
        logger.info("Getting all users")
        return self.get(USERS_ENDPOINT)

    def get_all_users_as_objects(self) -> list[User]:
        data = self.parse_json(self.get_all_users(), "users")
        if not isinstance(data, list):
            raise ApiError(f"Expected a JSON list of users, got {type(data).__name__}")
        return [User.from_dict(item) for item in data if isinstance(item, dict)]

    def get_user_by_id(self, user_id: int) -> requests.Response:
        logger.info("Getting user with ID: %s", user_id)
        return self.get(f"{USERS_ENDPOINT}/{user_id}")

    def get_user_by_id_as_object(self, user_id: int) -> User:
        return User.from_dict(self.parse_json(self.get_user_by_id(user_id), "user"))

    def create_user(self, user: User | dict) -> requests.Response:
        body = user.to_dict() if isinstance(user, User) else user
        logger.info("Creating new user: %s", body.get("name"))
        return self.post(USERS_ENDPOINT, body)

    def create_user_and_return(self, user: User | dict) -> User:
        return User.from_dict(self.parse_json(self.create_user(user), "created user"))

    def update_user(self, user_id: int, user: User | dict) -> requests.Response:
        logger.info("Updating user with ID: %s", user_id)
        body = user.to_dict() if isinstance(user, User) else user
        return self.put(f"{USERS_ENDPOINT}/{user_id}", body)

    def update_user_and_return(self, user_id: int, user: User | dict) -> User:
        return User.from_dict(self.parse_json(self.update_user(user_id, user), "updated user"))

    def patch_user(self, user_id: int, fields: dict) -> requests.Response:
        logger.info("Patching user with ID: %s", user_id)
        return self.patch(f"{USERS_ENDPOINT}/{user_id}", fields)

    def delete_user(self, user_id: int) -> requests.Response:
        logger.info("Deleting user with ID: %s", user_id)
        return self.delete(f"{USERS_ENDPOINT}/{user_id}")
