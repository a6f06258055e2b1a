from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from blog_api.core.config import Settings, get_settings
from blog_api.core.database import get_db
from blog_api.core.errors import InvalidCredentials, RegistrationFailed
from blog_api.core.security import create_access_token
from blog_api.models.user import User
from blog_api.schemas.user import RegisterRequest, RegisterResponse, LoginRequest, LoginResponse, UserResponse

router = APIRouter(tags=["auth"])

@router.post("/register", response_model=RegisterResponse)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Créer un nouvel utilisateur"""

    # Vérifie si l'email existe déjà
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise RegistrationFailed("Email already registered")

    # Vérifie si le username existe déjà
    existing_username = db.query(User).filter(User.username == user_data.username).first()
    if existing_username:
        raise RegistrationFailed("Username already taken")

    new_user = User(email=user_data.email, username=user_data.username)
    new_user.set_password(user_data.password)

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return RegisterResponse(user_id=new_user.id, email=new_user.email, username=new_user.username)

@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db), config: Settings = Depends(get_settings)):
    """Se connecter et recevoir le token"""

    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not user.verify_password(credentials.password):
        raise InvalidCredentials()

    return LoginResponse(
        token=create_access_token(user.id, user.email, config),
        user=UserResponse.model_validate(user),
    )
