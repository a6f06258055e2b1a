"""
Gestion d'un post et de ses blocks comme une seule unité.

create/update écrivent le post et tous ses blocks dans une même
transaction. L'upload éventuel d'image a lieu avant l'écriture en base :
en cas d'échec on laisse un blob orphelin plutôt qu'une référence cassée.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from blog_api.core.errors import BlogError, Forbidden, MalformedContent, NotFound, StoreFailure, store_error_message
from blog_api.core.storage import LocalObjectStore
from blog_api.models.content_block import ContentBlock, IMAGE
from blog_api.models.post import Post
from blog_api.services.content_service import (
    DEFAULT_MAX_IMAGE_BYTES,
    ImageUpload,
    normalize_content,
)

logger = logging.getLogger(__name__)


def _post_query(db: Session):
    return db.query(Post).options(joinedload(Post.author), selectinload(Post.blocks))


def _load_post(db: Session, post_id: int) -> Post:
    post = _post_query(db).filter(Post.id == post_id).first()
    if not post:
        raise NotFound("Blog not found")
    return post


def _ensure_owner(post: Post, user_id: int) -> None:
    if post.author_id != user_id:
        raise Forbidden("You are not the author of this blog")


def _clean_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise MalformedContent("Title is required")
    return title.strip()


def _image_urls(blocks: Iterable[ContentBlock]) -> List[str]:
    return [b.image_url for b in blocks if b.type == IMAGE and b.image_url]


def _uploaded_path(store: LocalObjectStore, blocks: List[ContentBlock], image: Optional[ImageUpload]) -> List[str]:
    # l'image uploadée par la normalisation est toujours le dernier block
    if image is None or not blocks:
        return []
    path = store.path_from_url(blocks[-1].image_url)
    return [path] if path else []


def discard_blobs(store: LocalObjectStore, urls: Iterable[str]) -> List[str]:
    """Supprime les blobs derrière ces URLs, sans jamais échouer. Renvoie les chemins supprimés."""
    removed = []
    for url in urls:
        path = store.path_from_url(url)
        if path is None:
            continue
        try:
            store.remove(path)
            removed.append(path)
        except BlogError as e:
            logger.warning("Could not delete blob %s: %s", path, e.message)
    return removed


def releasable_images(db: Session, store: LocalObjectStore, post_id: int, author_id: int, urls: Iterable[str]) -> List[str]:
    """
    Images qu'on peut supprimer en même temps que leurs blocks.

    Seuls les blobs rangés sous le dossier de l'auteur sont concernés, et
    seulement si aucun block d'un autre post ne les référence encore.
    """
    prefix = f"{author_id}/"
    releasable = []
    for url in urls:
        path = store.path_from_url(url)
        if path is None or not path.startswith(prefix):
            continue
        shared = db.query(ContentBlock.id).filter(
            ContentBlock.image_url == url,
            ContentBlock.post_id != post_id
        ).first()
        if shared:
            logger.info("Blob %s still used by another blog, kept", path)
            continue
        releasable.append(url)
    return releasable


def _store_failure(db: Session, error: SQLAlchemyError, orphans: List[str]) -> StoreFailure:
    db.rollback()
    logger.error("Store failure: %s", error, exc_info=True)
    for path in orphans:
        logger.warning("Blob %s left orphaned by failed write", path)
    return StoreFailure(store_error_message(error))


def create_post(
    db: Session,
    store: LocalObjectStore,
    author_id: int,
    title: str,
    published: bool,
    raw_content: Union[str, bytes, list],
    image: Optional[ImageUpload] = None,
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> Post:
    title = _clean_title(title)
    blocks = normalize_content(raw_content, author_id, store, image, max_image_bytes)

    post = Post(author_id=author_id, title=title, published=bool(published))
    try:
        db.add(post)
        db.flush()
        post.blocks = blocks
        db.commit()
    except SQLAlchemyError as e:
        raise _store_failure(db, e, _uploaded_path(store, blocks, image))

    logger.info("Blog %s created by user %s with %d blocks", post.id, author_id, len(blocks))
    return _load_post(db, post.id)


def get_post(db: Session, post_id: int, viewer_id: Optional[int] = None) -> Post:
    """Un brouillon n'est visible que par son auteur (NotFound pour les autres)"""
    post = _load_post(db, post_id)
    if not post.published and post.author_id != viewer_id:
        raise NotFound("Blog not found")
    return post


def list_published_posts(db: Session) -> List[Post]:
    return (
        _post_query(db)
        .filter(Post.published == True)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )


def list_posts_by_author(db: Session, author_id: int) -> List[Post]:
    return (
        _post_query(db)
        .filter(Post.author_id == author_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )


def update_post(
    db: Session,
    store: LocalObjectStore,
    post_id: int,
    acting_user_id: int,
    title: str,
    published: bool,
    raw_content: Union[str, bytes, list],
    image: Optional[ImageUpload] = None,
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> Post:
    post = _load_post(db, post_id)
    _ensure_owner(post, acting_user_id)
    title = _clean_title(title)
    author_id = post.author_id

    old_urls = _image_urls(post.blocks)
    blocks = normalize_content(raw_content, acting_user_id, store, image, max_image_bytes)

    try:
        post.title = title
        post.published = bool(published)
        # on remplace tout : suppression des anciens blocks avant insertion des nouveaux
        post.blocks = []
        db.flush()
        post.blocks = blocks
        db.commit()
    except SQLAlchemyError as e:
        raise _store_failure(db, e, _uploaded_path(store, blocks, image))

    # les images qui ne sont plus référencées partent du stockage
    kept = set(_image_urls(blocks))
    superseded = [url for url in old_urls if url not in kept]
    discard_blobs(store, releasable_images(db, store, post_id, author_id, superseded))

    logger.info("Blog %s updated by user %s with %d blocks", post_id, acting_user_id, len(blocks))
    return _load_post(db, post_id)


def delete_post(db: Session, store: LocalObjectStore, post_id: int, acting_user_id: int) -> None:
    post = _load_post(db, post_id)
    _ensure_owner(post, acting_user_id)

    discard_blobs(store, releasable_images(db, store, post.id, post.author_id, _image_urls(post.blocks)))

    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as e:
        raise _store_failure(db, e, [])

    logger.info("Blog %s deleted by user %s", post_id, acting_user_id)


def collect_orphan_blobs(
    db: Session,
    store: LocalObjectStore,
    min_age_seconds: int = 3600,
    dry_run: bool = False,
) -> List[str]:
    """
    Passe de réconciliation : repère les blobs qu'aucun block ne référence.

    Les blobs plus récents que min_age_seconds sont ignorés (upload en cours
    dont le post n'est pas encore écrit). Renvoie les chemins orphelins;
    ils sont supprimés sauf en dry_run.

    Lancé par scripts/collect_orphan_blobs.py.
    """
    referenced = set()
    rows = db.query(ContentBlock.image_url).filter(ContentBlock.type == IMAGE).all()
    for (url,) in rows:
        path = store.path_from_url(url)
        if path:
            referenced.add(path)

    cutoff = datetime.now(timezone.utc) - timedelta(seconds=min_age_seconds)
    orphans = sorted(
        path for path, modified in store.list_blobs()
        if path not in referenced and modified <= cutoff
    )

    if not dry_run:
        discard_blobs(store, [store.public_url(path) for path in orphans])
    logger.info("Found %d orphan blobs (dry_run=%s)", len(orphans), dry_run)
    return orphans
