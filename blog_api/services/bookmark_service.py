from sqlalchemy.orm import Session, joinedload
from typing import List

from blog_api.core.errors import NotFound
from blog_api.models.bookmark import Bookmark
from blog_api.models.post import Post


def add_bookmark(db: Session, user_id: int, post_id: int) -> Bookmark:
    # les doublons sont permis
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFound("Blog not found")

    bookmark = Bookmark(user_id=user_id, post_id=post_id)
    db.add(bookmark)
    db.commit()
    db.refresh(bookmark)
    return bookmark


def list_bookmarks(db: Session, user_id: int) -> List[Bookmark]:
    return (
        db.query(Bookmark)
        .options(joinedload(Bookmark.post))
        .filter(Bookmark.user_id == user_id)
        .order_by(Bookmark.id)
        .all()
    )


def remove_bookmark(db: Session, bookmark_id: int, user_id: int) -> None:
    # un bookmark d'un autre user est introuvable pour celui-ci
    bookmark = db.query(Bookmark).filter(
        Bookmark.id == bookmark_id,
        Bookmark.user_id == user_id
    ).first()
    if not bookmark:
        raise NotFound("Bookmark not found")

    db.delete(bookmark)
    db.commit()
