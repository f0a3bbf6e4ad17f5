from typing import Optional

from pydantic import Field

from ...core.schemas import CamelModel

HEX_COLOR = r'^#[0-9A-Fa-f]{6}$'


class CreateTagRequest(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class UpdateTagRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
