from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List

from blog_api.schemas.content_block import ContentBlockResponse

_camel = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class AuthorSummary(BaseModel):
    model_config = _camel

    id: int
    username: str
    email: str

class PostResponse(BaseModel):
    """Post + ses blocks ordonnés"""
    model_config = _camel

    id: int
    title: str
    author_id: int
    published: bool
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    blocks: List[ContentBlockResponse] = Field(default_factory=list, alias="content")

class PostListResponse(BaseModel):
    blogs: List[PostResponse] = []

class PostSummary(BaseModel):
    model_config = _camel

    id: int
    title: str
    author_id: int
    published: bool
    created_at: datetime

class DeletePostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    blog_id: int = Field(alias="blogId")
