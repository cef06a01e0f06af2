"""Pydantic schemas for User, roles and login."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    DONOR = "DONOR"
    CHARITY = "CHARITY"


class User(BaseModel):
    """Registered user. `role` is None between login and role selection."""

    id: str
    name: str
    contact: str = ""
    credential: str
    role: Optional[Role] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def has_identity(self, name: str, contact: str, credential: str) -> bool:
        return (self.name, self.contact, self.credential) == (name, contact, credential)


class UserRead(BaseModel):
    id: str
    name: str
    contact: str = ""
    role: Optional[Role] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LoginRequest(BaseModel):
    name: str
    contact: str = ""
    credential: str


class RoleRequest(BaseModel):
    role: Role
