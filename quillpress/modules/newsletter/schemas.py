from pydantic import EmailStr, field_validator

from ...core.schemas import CamelModel


class NewsletterEmailRequest(CamelModel):
    email: EmailStr

    @field_validator('email', mode='before')
    @classmethod
    def normalise_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value
