from os import getenv


class Settings:
    """Configuration du process, lue une seule fois au démarrage"""

    def __init__(self):
        self.DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://blog:blog@db:5432/blog")
        self.JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
        self.JWT_ALGORITHM = getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "1440"))  # expire au bout de 24h
        self.MEDIA_ROOT = getenv("MEDIA_ROOT", "./media")
        self.MEDIA_BASE_URL = getenv("MEDIA_BASE_URL", "http://localhost:8000/media").rstrip("/")
        self.MEDIA_MAX_BYTES = int(getenv("MEDIA_MAX_BYTES", str(5 * 1024 * 1024)))
        self.CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.LOG_LEVEL = getenv("LOG_LEVEL", "INFO")


settings = Settings()


def get_settings() -> Settings:
    """Dépendance settings"""
    return settings
