from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from cinelog.config.environment import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_AUDIENCE
from cinelog.domain.dto import TokenData
from cinelog.domain.models import Profile
from cinelog.exceptions.auth import InvalidTokenException
from cinelog.service.dependencies import get_profile_service
from cinelog.service.profile_service import ProfileService

# Tokens are minted by the external identity provider
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> TokenData:
    options = {} if JWT_AUDIENCE else {"verify_aud": False}
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            options=options
        )
    except JWTError as e:
        raise InvalidTokenException(str(e)) from e

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenException("Token has no subject")

    metadata = payload.get("user_metadata") or {}
    return TokenData(
        user_id=str(user_id),
        email=payload.get("email"),
        username=metadata.get("username"),
        display_name=metadata.get("display_name")
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    profile_service: ProfileService = Depends(get_profile_service)
) -> Profile:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        token_data = decode_token(credentials.credentials)
    except InvalidTokenException:
        raise credentials_exception

    # first request from a new identity creates its profile
    return profile_service.provision(
        user_id=token_data.user_id,
        email=token_data.email,
        username=token_data.username,
        display_name=token_data.display_name
    )
