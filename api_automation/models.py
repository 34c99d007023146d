"""
Data models for the resources exposed by the API under test.

Plain dataclasses mirroring the JSONPlaceholder payloads.  ``from_dict``
ignores unknown keys so that additive API changes never break parsing,
and ``to_dict`` emits the API's camelCase field names so a model can be
sent straight back as a request body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Post:
    """A blog post owned by a user."""

    id: int | None = None
    title: str | None = None
    body: str | None = None
    user_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Post":
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            body=data.get("body"),
            user_id=data.get("userId"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "body": self.body, "userId": self.user_id}


@dataclass
class Comment:
    """A comment left on a post."""

    id: int | None = None
    name: str | None = None
    email: str | None = None
    body: str | None = None
    post_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            email=data.get("email"),
            body=data.get("body"),
            post_id=data.get("postId"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "body": self.body,
            "postId": self.post_id,
        }


@dataclass
class Geo:
    latitude: str | None = None
    longitude: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Geo":
        return cls(latitude=data.get("lat"), longitude=data.get("lng"))

    def to_dict(self) -> dict[str, Any]:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass
class Address:
    street: str | None = None
    suite: str | None = None
    city: str | None = None
    zipcode: str | None = None
    geo: Geo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Address":
        geo = data.get("geo")
        return cls(
            street=data.get("street"),
            suite=data.get("suite"),
            city=data.get("city"),
            zipcode=data.get("zipcode"),
            geo=Geo.from_dict(geo) if isinstance(geo, dict) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "street": self.street,
            "suite": self.suite,
            "city": self.city,
            "zipcode": self.zipcode,
            "geo": self.geo.to_dict() if self.geo else None,
        }


@dataclass
class Company:
    name: str | None = None
    catch_phrase: str | None = None
    bs: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Company":
        return cls(name=data.get("name"), catch_phrase=data.get("catchPhrase"), bs=data.get("bs"))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "catchPhrase": self.catch_phrase, "bs": self.bs}


@dataclass
class User:
    """
    A registered user with nested address and company details.

    Attributes:
        id: Server-assigned identifier.
        name: Full display name.
        username: Login handle.
        email: Contact email address.
        phone: Free-form phone number.
        website: Personal website host.
        address: Optional postal address with coordinates.
        company: Optional employer details.
    """

    id: int | None = None
    name: str | None = None
    username: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    address: Address | None = None
    company: Company | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        address = data.get("address")
        company = data.get("company")
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            username=data.get("username"),
            email=data.get("email"),
            phone=data.get("phone"),
            website=data.get("website"),
            address=Address.from_dict(address) if isinstance(address, dict) else None,
            company=Company.from_dict(company) if isinstance(company, dict) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "phone": self.phone,
            "website": self.website,
            "address": self.address.to_dict() if self.address else None,
            "company": self.company.to_dict() if self.company else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.username}>"
