"""
Locust plan: read-heavy mixed traffic against the REST API.

Used by :class:`~api_automation.performance.locust_runner.LocustTestRunner`
(``api-perf plan --plan .../api_load.py``) and runnable directly::

    locust -f api_automation/performance/plans/api_load.py --host https://jsonplaceholder.typicode.com

The weight distribution (total weight 10) is:

- **70 % reads**: list posts (4), get single post (3)
- **20 % related reads**: list users (1), list comments (1)
- **10 % writes**: create post (1)
"""

from __future__ import annotations

import random
from typing import Any

from locust import HttpUser, between, task

MAX_POST_ID = 100
MAX_USER_ID = 10


def _safe_json(response: Any) -> Any:
    """Return the response JSON, or ``None`` if the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def _random_post_payload() -> dict[str, Any]:
    suffix = random.randint(1000, 9999)
    return {
        "title": f"Perf post {suffix}",
        "body": "Created by Locust performance plan",
        "userId": random.randint(1, MAX_USER_ID),
    }


class ApiTrafficUser(HttpUser):
    """
    Simulates a client browsing posts with occasional writes.

    Each virtual user waits 1–2 seconds between actions.  Post ids are
    randomised so requests spread across the collection instead of
    hammering a single cached entry.
    """

    wait_time = between(1, 2)

    def _get_list(self, path: str) -> None:
        with self.client.get(path, name=f"{path} [GET]", catch_response=True) as response:
            if response.status_code != 200:
                response.failure(f"Expected 200, got {response.status_code}")
                return
            if not isinstance(_safe_json(response), list):
                response.failure(f"{path} response is not a list")
                return
            response.success()

    @task(4)
    def list_posts(self) -> None:
        self._get_list("/posts")

    @task(3)
    def get_single_post(self) -> None:
        post_id = random.randint(1, MAX_POST_ID)
        with self.client.get(
            f"/posts/{post_id}", name="/posts/[id] [GET]", catch_response=True
        ) as response:
            if response.status_code != 200:
                response.failure(f"Expected 200, got {response.status_code}")
                return
            body = _safe_json(response)
            if not isinstance(body, dict) or body.get("id") != post_id:
                response.failure("Fetched post id does not match request")
                return
            response.success()

    @task(1)
    def list_users(self) -> None:
        self._get_list("/users")

    @task(1)
    def list_comments(self) -> None:
        self._get_list("/comments")

    @task(1)
    def create_post(self) -> None:
        with self.client.post(
            "/posts", json=_random_post_payload(), name="/posts [POST]", catch_response=True
        ) as response:
            if response.status_code != 201:
                response.failure(f"Expected 201, got {response.status_code}")
                return
            body = _safe_json(response)
            if not isinstance(body, dict) or "id" not in body:
                response.failure("Create response missing id")
                return
            response.success()
