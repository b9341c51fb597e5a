from pydantic import AliasChoices, EmailStr, Field, field_validator

from app.models.enums import UserRole
from app.schemas.base import BaseSchema, InputSchema
from app.schemas.users import UserRetrieveSchema
from uuid import UUID


class UserPrincipal(BaseSchema):
    user_id: UUID = Field(
        validation_alias=AliasChoices("sub", "user_id", "id"),
        serialization_alias="sub",
    )
    email: str
    role: UserRole


class AuthenticationResponseSchema(BaseSchema):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserRetrieveSchema


class RegisterSchema(InputSchema):
    first_name: str = Field(min_length=2, max_length=100)
    last_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginSchema(InputSchema):
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()
