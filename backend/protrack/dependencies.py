from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from protrack.core.exceptions import AuthenticationException, PageAccessDeniedException
from protrack.database import SessionLocal
from protrack.repositories.state_store import USER_KEY, SqlStateStore, StateStore
from protrack.schemas.auth import UserRecord
from protrack.services.auth_service import has_page_access
from protrack.sheets.gateway import SheetsGateway

StateStoreFactory = Callable[[str], StateStore]

bearer_scheme = HTTPBearer(auto_error=False)


def get_gateway(request: Request) -> SheetsGateway:
    return request.app.state.gateway


def get_state_store_factory() -> StateStoreFactory:
    return lambda token: SqlStateStore(SessionLocal, namespace=token)


def get_session_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    token = credentials.credentials.strip() if credentials else ""
    if not token:
        raise AuthenticationException("Not logged in.")
    return token


def get_state_store(
    token: str = Depends(get_session_token),
    factory: StateStoreFactory = Depends(get_state_store_factory),
) -> StateStore:
    return factory(token)


def get_current_user(store: StateStore = Depends(get_state_store)) -> UserRecord:
    data = store.load(USER_KEY)
    if not data:
        raise AuthenticationException("Session expired or unknown; log in again.")
    return UserRecord.model_validate(data)


def require_page_access(page: str) -> Callable[..., UserRecord]:
    def checker(current_user: UserRecord = Depends(get_current_user)) -> UserRecord:
        if not has_page_access(current_user.page_access, page):
            raise PageAccessDeniedException(page)
        return current_user

    return checker
