from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ...core.schemas import CamelModel, is_http_url


class RegisterRequest(CamelModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=20)
    password: str = Field(min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    recaptcha_token: Optional[str] = None

    @field_validator('email')
    @classmethod
    def normalise_email(cls, value):
        return value.strip().lower()


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    recaptcha_token: Optional[str] = None

    @field_validator('email')
    @classmethod
    def normalise_email(cls, value):
        return value.strip().lower()


class UpdateProfileRequest(CamelModel):
    # An empty string clears the field
    avatar: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)

    @field_validator('avatar')
    @classmethod
    def avatar_is_url(cls, value):
        if value and not is_http_url(value):
            raise ValueError('Invalid avatar URL')
        return value
