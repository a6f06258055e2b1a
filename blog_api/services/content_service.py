"""
Normalisation des blocks de contenu d'un post.

Le client envoie un tableau JSON de blocks dans l'ordre de lecture,
plus éventuellement une image uploadée. On en fait une séquence
canonique de ContentBlock (non persistés) numérotés 1..N.
"""

import logging
import re
import time
import uuid
from typing import List, NamedTuple, Optional, Union

from pydantic import ValidationError

from blog_api.core.errors import MalformedContent
from blog_api.core.storage import LocalObjectStore
from blog_api.models.content_block import ContentBlock, IMAGE, TEXT
from blog_api.schemas.content_block import TextBlockIn, ImageBlockIn, content_blocks_adapter

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024


class ImageUpload(NamedTuple):
    data: bytes
    content_type: str
    filename: str


def parse_content(raw_content: Union[str, bytes, list]) -> List[Union[TextBlockIn, ImageBlockIn]]:
    """Parse le tableau de blocks, MalformedContent si un élément est invalide"""
    try:
        if isinstance(raw_content, (str, bytes)):
            return content_blocks_adapter.validate_json(raw_content)
        return content_blocks_adapter.validate_python(raw_content)
    except ValidationError as e:
        raise MalformedContent(f"Malformed content: {_first_error(e)}")


def _first_error(error: ValidationError) -> str:
    err = error.errors()[0]
    location = ".".join(str(p) for p in err.get("loc", ()))
    return f"{location}: {err.get('msg')}" if location else err.get("msg", "invalid")


def sanitize_filename(filename: Optional[str]) -> str:
    # on garde le nom de base, sans chemin ni caractères exotiques
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
    return name or "image"


def build_image_path(user_id: int, filename: Optional[str]) -> str:
    """<userId>/<epochMillis>-<random>-<nom>"""
    stamp = int(time.time() * 1000)
    return f"{user_id}/{stamp}-{uuid.uuid4().hex[:8]}-{sanitize_filename(filename)}"


def check_image(image: ImageUpload, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> None:
    if not image.content_type or not image.content_type.startswith("image/"):
        raise MalformedContent("Uploaded file must be an image")
    if not image.data:
        raise MalformedContent("Uploaded image is empty")
    if len(image.data) > max_bytes:
        raise MalformedContent(f"Uploaded image is too large (max {max_bytes} bytes)")


def normalize_content(
    raw_content: Union[str, bytes, list],
    user_id: int,
    store: LocalObjectStore,
    image: Optional[ImageUpload] = None,
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> List[ContentBlock]:
    # 1. parse et validation
    parsed = parse_content(raw_content)

    blocks = []
    for item in parsed:
        if isinstance(item, TextBlockIn):
            blocks.append(ContentBlock(type=TEXT, text_content=item.text_content))
        else:
            blocks.append(ContentBlock(type=IMAGE, image_url=item.image_url))

    # 2. l'image uploadée est stockée puis ajoutée en fin de séquence
    if image is not None:
        check_image(image, max_image_bytes)
        path = build_image_path(user_id, image.filename)
        store.upload(path, image.data, image.content_type)
        blocks.append(ContentBlock(type=IMAGE, image_url=store.public_url(path)))
        logger.info("Uploaded image %s appended for user %s", path, user_id)

    # 3. renumérotation inconditionnelle 1..N
    for position, block in enumerate(blocks, start=1):
        block.position = position

    return blocks

