from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from blog_api.core.auth import get_current_identity
from blog_api.core.database import get_db
from blog_api.schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkListResponse, MessageResponse
from blog_api.schemas.user import TokenIdentity
from blog_api.services import bookmark_service

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def add_bookmark(data: BookmarkCreate, db: Session = Depends(get_db), identity: TokenIdentity = Depends(get_current_identity)):
    bookmark_service.add_bookmark(db, identity.user_id, data.post_id)
    return {"message": "Bookmark added"}


@router.get("", response_model=BookmarkListResponse)
def list_bookmarks(db: Session = Depends(get_db), identity: TokenIdentity = Depends(get_current_identity)):
    bookmarks = bookmark_service.list_bookmarks(db, identity.user_id)
    return BookmarkListResponse(bookmarks=[BookmarkResponse.model_validate(b) for b in bookmarks])


@router.delete("/{bookmark_id}", response_model=MessageResponse)
def remove_bookmark(bookmark_id: int, db: Session = Depends(get_db), identity: TokenIdentity = Depends(get_current_identity)):
    bookmark_service.remove_bookmark(db, bookmark_id, identity.user_id)
    return {"message": "Bookmark removed"}
