import secrets

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from textextract.config import settings
from textextract.core.exceptions import AuthenticationError

bearer_scheme = HTTPBearer(auto_error=False)


async def verify_api_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    """Require the shared service token when one is configured."""
    if not settings.api_token:
        return
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    if not secrets.compare_digest(credentials.credentials, settings.api_token):
        raise AuthenticationError("Invalid bearer token")
