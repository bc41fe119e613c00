from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taxdocs.api.security import AuthenticationError, Identity, decode_token
from taxdocs.config.settings import Settings
from taxdocs.database.repositories.users_repository import UsersRepository
from taxdocs.processor.processor import Processor

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_processor(request: Request) -> Processor:
    return request.app.state.processor


def get_users_repo(request: Request) -> UsersRepository:
    return request.app.state.users_repo


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    users_repo: UsersRepository = Depends(get_users_repo),
) -> Identity:
    """Resolve the caller from the bearer token, else raise AuthenticationError."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized")

    payload = decode_token(credentials.credentials, settings.auth_secret, settings.auth_algorithm)
    email = payload.get("email")
    subject = payload.get("sub")
    if isinstance(email, str) and email:
        user = users_repo.find_by_email(email)
    elif isinstance(subject, str) and subject:
        user = users_repo.find_by_id(subject)
    else:
        raise AuthenticationError("Unauthorized")

    if user is None:
        raise AuthenticationError("User not found")
    return Identity(user_id=user.id, email=user.email)
