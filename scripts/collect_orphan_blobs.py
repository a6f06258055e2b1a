#!/usr/bin/env python3
"""
Supprime les images du stockage qu'aucun block ne référence plus.

Un upload suivi d'un échec d'écriture en base laisse un blob orphelin;
ce script fait la passe de réconciliation (à lancer en cron par ex.).

Usage:
    # Liste seulement
    python scripts/collect_orphan_blobs.py --dry-run

    # Supprime les orphelins de plus d'une heure
    python scripts/collect_orphan_blobs.py

    # Changer l'âge minimum (secondes)
    python scripts/collect_orphan_blobs.py --min-age 86400

Environment:
    DATABASE_URL: connexion à la base
    MEDIA_ROOT / MEDIA_BASE_URL: stockage des images
"""

import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blog_api.core.config import settings
from blog_api.core.database import SessionLocal
from blog_api.core.storage import LocalObjectStore
from blog_api.models import user, post, content_block, bookmark  # noqa: F401 (mappers)
from blog_api.services.post_service import collect_orphan_blobs

logger = logging.getLogger("collect_orphan_blobs")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Remove stored images no content block references")
    parser.add_argument("--dry-run", action="store_true", help="only list orphan blobs")
    parser.add_argument("--min-age", type=int, default=3600, help="skip blobs younger than this (seconds)")
    args = parser.parse_args(argv)

    store = LocalObjectStore(settings.MEDIA_ROOT, settings.MEDIA_BASE_URL)
    db = SessionLocal()
    try:
        orphans = collect_orphan_blobs(db, store, min_age_seconds=args.min_age, dry_run=args.dry_run)
    finally:
        db.close()

    for path in orphans:
        print(path)
    logger.info("%s %d orphan blobs", "Found" if args.dry_run else "Removed", len(orphans))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    sys.exit(main())
