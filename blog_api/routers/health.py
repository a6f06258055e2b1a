from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {"message": "API is up and running!"}

@router.get("/health/z")
def healthz():
    # Check si l'API est up
    return {"status": "ok"}
