from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional

from blog_api.core.auth import get_current_identity, get_optional_identity
from blog_api.core.config import Settings, get_settings
from blog_api.core.database import get_db
from blog_api.core.storage import LocalObjectStore, get_object_store
from blog_api.schemas.post import PostResponse, PostListResponse, DeletePostResponse
from blog_api.schemas.user import TokenIdentity
from blog_api.services import post_service
from blog_api.services.content_service import ImageUpload

router = APIRouter(tags=["blogs"])


def read_image(image: Optional[UploadFile], max_bytes: int) -> Optional[ImageUpload]:
    """Convertit le fichier multipart, un champ vide compte comme absent"""
    if image is None or not image.filename:
        return None
    # un octet de plus que la limite suffit pour que check_image refuse le fichier
    return ImageUpload(
        data=image.file.read(max_bytes + 1),
        content_type=image.content_type or "",
        filename=image.filename,
    )


@router.post("/blogs", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_blog(
    title: str = Form(...),
    content: str = Form(...),
    publish: bool = Form(False),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
    config: Settings = Depends(get_settings),
    identity: TokenIdentity = Depends(get_current_identity),
):
    """Créer un post avec ses blocks (+ image optionnelle ajoutée en fin)"""
    return post_service.create_post(
        db, store, identity.user_id, title, publish, content,
        read_image(image, config.MEDIA_MAX_BYTES), config.MEDIA_MAX_BYTES,
    )


@router.get("/blogs", response_model=PostListResponse)
def list_blogs(db: Session = Depends(get_db)):
    # posts publiés, plus récents d'abord
    posts = post_service.list_published_posts(db)
    return PostListResponse(blogs=[PostResponse.model_validate(p) for p in posts])


@router.get("/myblogs", response_model=PostListResponse)
def list_my_blogs(db: Session = Depends(get_db), identity: TokenIdentity = Depends(get_current_identity)):
    posts = post_service.list_posts_by_author(db, identity.user_id)
    return PostListResponse(blogs=[PostResponse.model_validate(p) for p in posts])


@router.get("/blogs/{blog_id}", response_model=PostResponse)
def get_blog(
    blog_id: int,
    db: Session = Depends(get_db),
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
):
    viewer_id = identity.user_id if identity else None
    return post_service.get_post(db, blog_id, viewer_id)


@router.put("/blogs/{blog_id}", response_model=PostResponse)
def update_blog(
    blog_id: int,
    title: str = Form(...),
    content: str = Form(...),
    publish: bool = Form(False),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
    config: Settings = Depends(get_settings),
    identity: TokenIdentity = Depends(get_current_identity),
):
    """Remplace titre, statut et tous les blocks du post"""
    return post_service.update_post(
        db, store, blog_id, identity.user_id, title, publish, content,
        read_image(image, config.MEDIA_MAX_BYTES), config.MEDIA_MAX_BYTES,
    )


@router.delete("/blogs/{blog_id}", response_model=DeletePostResponse)
def delete_blog(
    blog_id: int,
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
    identity: TokenIdentity = Depends(get_current_identity),
):
    post_service.delete_post(db, store, blog_id, identity.user_id)
    return DeletePostResponse(message="Blog deleted", blog_id=blog_id)
