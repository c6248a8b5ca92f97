from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Header, HTTPException

from wishrift.core.config import settings


@dataclass(frozen=True)
class Identity:
    """Who the identity provider says the caller is."""

    user_id: str
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


def decode_token(token: str) -> dict:
    options = {"require": ["sub"]}
    if not settings.AUTH_JWT_AUDIENCE:
        options["verify_aud"] = False
    return jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE,
        options=options,
    )


def identity_from_claims(claims: dict) -> Identity:
    user_id = str(claims["sub"])
    username = (
        claims.get("preferred_username")
        or claims.get("username")
        or claims.get("email")
        or user_id
    )
    return Identity(
        user_id=user_id,
        username=username,
        email=claims.get("email"),
        first_name=claims.get("given_name"),
        last_name=claims.get("family_name"),
        profile_image_url=claims.get("picture"),
    )


def verify_token(authorization: str = Header(None)) -> Identity:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    token = authorization.replace("Bearer ", "").strip()
    try:
        claims = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token: no user ID")
    return identity_from_claims(claims)
