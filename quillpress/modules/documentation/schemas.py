from typing import List, Optional

from pydantic import Field

from ...core.schemas import CamelModel


class CreateProductRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    published: bool = False
    sidebar_position: Optional[int] = None


class UpdateProductRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    published: Optional[bool] = None
    sidebar_position: Optional[int] = None


class CreateSectionRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    published: bool = False
    sidebar_position: Optional[int] = None


class UpdateSectionRequest(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    published: Optional[bool] = None
    sidebar_position: Optional[int] = None


class CreatePageRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=255)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    published: bool = False
    sidebar_position: Optional[int] = None


class UpdatePageRequest(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    published: Optional[bool] = None
    sidebar_position: Optional[int] = None


class ReorderItem(CamelModel):
    id: str = Field(min_length=1)
    sidebar_position: int


class ReorderRequest(CamelModel):
    items: List[ReorderItem]
