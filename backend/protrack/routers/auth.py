from fastapi import APIRouter, Depends

from protrack.dependencies import (
    StateStoreFactory,
    get_current_user,
    get_gateway,
    get_state_store,
    get_state_store_factory,
)
from protrack.repositories.state_store import StateStore
from protrack.schemas.auth import ActiveViewResponse, ActiveViewUpdate, LoginRequest, LoginResponse, UserRecord
from protrack.schemas.common import OperationResponse
from protrack.services.auth_service import AuthService, SessionService
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(tags=["Authentication"])


def get_auth_service(
    gateway: SheetsGateway = Depends(get_gateway),
    store_factory: StateStoreFactory = Depends(get_state_store_factory),
) -> AuthService:
    return AuthService(gateway, store_factory)


def get_session_service(store: StateStore = Depends(get_state_store)) -> SessionService:
    return SessionService(store)


@router.post("/auth/login", response_model=LoginResponse)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return await service.login(body)


@router.post("/auth/logout", response_model=OperationResponse)
def logout(
    service: SessionService = Depends(get_session_service),
    _: UserRecord = Depends(get_current_user),
):
    service.logout()
    return OperationResponse(success=True, message="Logged out.")


@router.get("/auth/me", response_model=UserRecord)
def me(current_user: UserRecord = Depends(get_current_user)):
    return current_user


@router.get("/session/active-view", response_model=ActiveViewResponse)
def get_active_view(
    service: SessionService = Depends(get_session_service),
    _: UserRecord = Depends(get_current_user),
):
    return ActiveViewResponse(view=service.active_view())


@router.put("/session/active-view", response_model=ActiveViewResponse)
def set_active_view(
    body: ActiveViewUpdate,
    service: SessionService = Depends(get_session_service),
    current_user: UserRecord = Depends(get_current_user),
):
    return ActiveViewResponse(view=service.set_active_view(current_user, body.view.strip()))
