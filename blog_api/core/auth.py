from typing import Optional

from fastapi import Depends, Header, Request

from blog_api.core.config import Settings, get_settings
from blog_api.core.errors import InvalidToken
from blog_api.core.security import verify_token
from blog_api.schemas.user import TokenIdentity


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extrait le token d'un header "Authorization: Bearer <token>" """
    if not authorization or not authorization.strip():
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        raise InvalidToken()
    return token.strip() or None


def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    config: Settings = Depends(get_settings),
) -> TokenIdentity:
    """
    Filtre d'autorisation des routes en écriture.

    Pas de token -> 401, token invalide ou expiré -> 403.
    L'identité décodée est attachée à request.state.identity.
    """
    identity = verify_token(extract_bearer_token(authorization), config)
    request.state.identity = identity
    return identity


def get_optional_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    config: Settings = Depends(get_settings),
) -> Optional[TokenIdentity]:
    # lecture publique : l'identité est facultative mais un token présent doit être valide
    token = extract_bearer_token(authorization)
    if token is None:
        request.state.identity = None
        return None
    identity = verify_token(token, config)
    request.state.identity = identity
    return identity
