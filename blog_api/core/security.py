from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from blog_api.core.config import Settings, settings
from blog_api.core.errors import InvalidToken, MissingToken
from blog_api.schemas.user import TokenIdentity

def create_access_token(user_id: int, email: str, config: Settings = settings) -> str:
    # token porteur signé, valable JWT_EXPIRE_MIN minutes (24h par défaut)
    payload = {
        "userId": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=config.JWT_EXPIRE_MIN),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

def verify_token(token: Optional[str], config: Settings = settings) -> TokenIdentity:
    """Décode le token et renvoie l'identité {userId, email}"""
    if not token:
        raise MissingToken()
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        raise InvalidToken()

    user_id = payload.get("userId")
    email = payload.get("email")
    if not isinstance(user_id, int) or not isinstance(email, str):
        raise InvalidToken()
    return TokenIdentity(user_id=user_id, email=email)
