import logging
import secrets
from typing import Callable, Iterable, Optional

from protrack.core.exceptions import AuthenticationException, BusinessRuleViolationException
from protrack.repositories.state_store import ACTIVE_VIEW_KEY, USER_KEY, StateStore
from protrack.repositories.user_repository import UserRepository
from protrack.schemas.auth import LoginRequest, LoginResponse, UserRecord
from protrack.sheets.gateway import SheetsGateway

logger = logging.getLogger(__name__)

SESSION_TOKEN_BYTES = 32

ALL_PAGES = "all"

PAGE_DASHBOARD = "Dashboard"
PAGE_PRODUCTION = "SF Production"
PAGE_PLANNING = "Job Card Planning"
PAGE_ACTUAL_ENTRY = "Actual Entry"
PAGE_MARK_DONE = "Mark Done"
PAGE_CRUSHING = "Crushing"

DEFAULT_VIEW = "dashboard"
VIEW_PAGES = {
    "dashboard": PAGE_DASHBOARD,
    "step1": PAGE_PRODUCTION,
    "step2": PAGE_PLANNING,
    "step3": PAGE_ACTUAL_ENTRY,
    "step4": PAGE_MARK_DONE,
    "step5": PAGE_CRUSHING,
}


def has_page_access(pages: Iterable[str], page: str) -> bool:
    granted = {p.strip().lower() for p in pages}
    return ALL_PAGES in granted or page.strip().lower() in granted


class AuthService:
    """Login against the USER sheet; each login opens a fresh session."""

    def __init__(self, gateway: SheetsGateway, store_factory: Callable[[str], StateStore]):
        self._users = UserRepository(gateway)
        self._store_factory = store_factory

    async def login(self, body: LoginRequest) -> LoginResponse:
        user = await self._users.find_by_credentials(body.username, body.password)
        if user is None:
            logger.info("login_failed username=%s", body.username.strip())
            raise AuthenticationException("Invalid username or password.")

        token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
        store = self._store_factory(token)
        store.save(USER_KEY, user.model_dump(mode="json"))
        store.save(ACTIVE_VIEW_KEY, DEFAULT_VIEW)
        logger.info("login_succeeded username=%s pages=%s", user.username, ",".join(user.page_access))
        return LoginResponse(access_token=token, user=user)


class SessionService:
    """The logged-in user and active view of one session."""

    def __init__(self, store: StateStore):
        self._store = store

    def logout(self) -> None:
        self._store.clear()

    def current_user(self) -> Optional[UserRecord]:
        data = self._store.load(USER_KEY)
        return UserRecord.model_validate(data) if data else None

    def active_view(self) -> str:
        return self._store.load(ACTIVE_VIEW_KEY, DEFAULT_VIEW)

    def set_active_view(self, user: UserRecord, view: str) -> str:
        page = VIEW_PAGES.get(view)
        if page is None:
            raise BusinessRuleViolationException(f"Unknown view '{view}'.")
        if not has_page_access(user.page_access, page):
            raise BusinessRuleViolationException(f"View '{view}' is not available to '{user.username}'.")
        self._store.save(ACTIVE_VIEW_KEY, view)
        return view
