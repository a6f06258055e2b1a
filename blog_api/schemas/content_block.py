from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class TextBlockIn(BaseModel):
    """Block texte envoyé par le client"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["text"]
    text_content: str = Field(alias="textContent")
    image_url: None = Field(default=None, alias="imageUrl")


class ImageBlockIn(BaseModel):
    """Block image envoyé par le client"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["image"]
    image_url: str = Field(alias="imageUrl", min_length=1)
    text_content: None = Field(default=None, alias="textContent")


ContentBlockIn = Annotated[Union[TextBlockIn, ImageBlockIn], Field(discriminator="type")]
content_blocks_adapter = TypeAdapter(List[ContentBlockIn])


class ContentBlockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    id: int
    post_id: int
    type: str
    text_content: Optional[str] = None
    image_url: Optional[str] = None
    position: int
