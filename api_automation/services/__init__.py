"""
HTTP service clients for the REST API under test.

Each service wraps one resource collection and returns raw
``requests.Response`` objects (for status/latency assertions) alongside
typed ``*_as_object(s)`` variants that parse the body into
:mod:`api_automation.models` dataclasses.
"""

from api_automation.services.base import ApiError, BaseService
from api_automation.services.posts import PostService
from api_automation.services.users import UserService

__all__ = ["ApiError", "BaseService", "PostService", "UserService"]
