import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blog_api.core.config import settings
from blog_api.core.database import engine, Base
from blog_api.core.errors import register_exception_handlers
from blog_api.models import user, post, content_block, bookmark  # noqa: F401 (tables)
from blog_api.routers import health, auth, blogs, bookmarks

logging.basicConfig(level=settings.LOG_LEVEL)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Blog API",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Images servies publiquement sous MEDIA_BASE_URL
Path(settings.MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.MEDIA_ROOT), name="media")

# Routes
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(blogs.router)
app.include_router(bookmarks.router)
