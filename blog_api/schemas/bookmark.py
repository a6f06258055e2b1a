from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional

from blog_api.schemas.post import PostSummary


class BookmarkCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    post_id: int = Field(alias="blogId")

class BookmarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    id: int
    user_id: int
    post_id: int = Field(alias="blogId")
    created_at: datetime
    post: Optional[PostSummary] = Field(default=None, alias="blog")

class BookmarkListResponse(BaseModel):
    bookmarks: List[BookmarkResponse] = []

class MessageResponse(BaseModel):
    message: str
