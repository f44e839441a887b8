"""
FastAPI dependencies: settings, authenticated caller, service clients
"""
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobdesk.core.config import Settings
from jobdesk.core.errors import AuthenticationError, InvalidTokenError
from jobdesk.core.security import TokenClaims, decode_access_token
from jobdesk.services.ai_assist import AIAssistService
from jobdesk.services.bias_detection_service import BiasDetectionService
from jobdesk.services.platform_publisher import PlatformPublisher

# auto_error is off so a missing header renders through our error handlers
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """
    Resolve the caller from the bearer token.
    No token -> 401, bad or expired token -> 403.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    try:
        claims = decode_access_token(
            credentials.credentials,
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
    except jwt.InvalidTokenError:
        raise InvalidTokenError("Invalid or expired token")

    request.state.user_id = claims.id
    return claims


def get_ai_service(settings: Settings = Depends(get_settings)) -> AIAssistService:
    return AIAssistService(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )


def get_bias_service(settings: Settings = Depends(get_settings)) -> BiasDetectionService:
    return BiasDetectionService(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )


def get_publisher(settings: Settings = Depends(get_settings)) -> PlatformPublisher:
    return PlatformPublisher(settings)
