"""Pydantic schemas for sign-in, sign-up and the persisted user profile."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SignInRequest(BaseModel):
    """Credentials sent to POST /auth/signin."""

    username: str
    password: str


class SignInResponse(BaseModel):
    """Successful sign-in response carrying the issued bearer token."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = Field(validation_alias="accessToken")
    id: int
    username: str
    email: str


class SignUpRequest(BaseModel):
    """New-account request sent to POST /auth/signup."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str
    email: str
    password: str
    first_name: str
    last_name: str


class UserProfile(BaseModel):
    """User identity persisted next to the token (``userData`` key)."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str
    email: str
