from typing import List, Optional

from pydantic import Field, field_validator

from ...core.database import parse_iso_datetime
from ...core.schemas import CamelModel, is_http_url


class PostFields(CamelModel):
    excerpt: Optional[str] = Field(default=None, max_length=500)
    cover_image: Optional[str] = None
    tag_ids: Optional[List[str]] = None
    created_at: Optional[str] = None

    @field_validator('cover_image')
    @classmethod
    def cover_image_is_url(cls, value):
        # Local storage hands out site-relative paths
        if value is not None and not (is_http_url(value) or value.startswith('/')):
            raise ValueError('Cover image must be a valid URL')
        return value

    @field_validator('created_at')
    @classmethod
    def created_at_is_date(cls, value):
        if not value:
            return None
        try:
            parse_iso_datetime(value)
        except ValueError:
            raise ValueError('Please enter a valid date and time')
        return value


class CreatePostRequest(PostFields):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    published: bool = False


class UpdatePostRequest(PostFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    published: Optional[bool] = None
