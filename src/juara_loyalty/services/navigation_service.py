"""Role-guarded page routing.

Pages are the states; each role has a permitted set and a fallback page
that any disallowed request is redirected to.
"""

from __future__ import annotations

import enum
from typing import Optional

from ..models import Role


class Page(str, enum.Enum):
    HOME = "home"
    REGISTER = "register"
    MEMBER_LOGIN = "member-login"
    ADMIN_LOGIN = "admin-login"
    ABOUT = "about"
    MEMBER_DASHBOARD = "member-dashboard"
    ADMIN_DASHBOARD = "admin-dashboard"
    ALL_MEMBERS = "all-members"
    INVENTORY = "inventory"
    SETTINGS = "settings"
    REDEMPTION_HISTORY = "redemption-history"


ANONYMOUS = "anonymous"

PUBLIC_PAGES = frozenset({Page.HOME, Page.REGISTER, Page.MEMBER_LOGIN, Page.ADMIN_LOGIN, Page.ABOUT})
MEMBER_PAGES = frozenset({Page.MEMBER_DASHBOARD, Page.ABOUT})
ADMIN_PAGES = frozenset(
    {Page.ADMIN_DASHBOARD, Page.ALL_MEMBERS, Page.INVENTORY, Page.SETTINGS, Page.REDEMPTION_HISTORY}
)

_GUARDS: dict[str, tuple[frozenset, Page]] = {
    ANONYMOUS: (PUBLIC_PAGES, Page.HOME),
    Role.MEMBER.value: (MEMBER_PAGES, Page.MEMBER_DASHBOARD),
    Role.ADMIN.value: (ADMIN_PAGES, Page.ADMIN_DASHBOARD),
}


def role_key(role: Optional[Role]) -> str:
    return role.value if role is not None else ANONYMOUS


def permitted_pages(role: Optional[Role]) -> frozenset:
    return _GUARDS[role_key(role)][0]


def landing_page(role: Optional[Role]) -> Page:
    return _GUARDS[role_key(role)][1]


def resolve(role: Optional[Role], page: Page) -> Page:
    """Return ``page`` if the role may see it, otherwise the role's landing page."""

    allowed, fallback = _GUARDS[role_key(role)]
    return page if page in allowed else fallback


class Navigator:
    """History-stack navigation for a single client."""

    def __init__(self, role: Optional[Role] = None) -> None:
        self.role = role
        self.history: list[Page] = [landing_page(role)]

    @property
    def current(self) -> Page:
        return self.history[-1]

    def navigate(self, page: Page) -> Page:
        target = resolve(self.role, page)
        if target != self.current:
            self.history.append(target)
        return self.current

    def back(self) -> Page:
        if len(self.history) > 1:
            self.history.pop()
        return self.current

    def reset(self, role: Optional[Role] = None) -> Page:
        self.role = role
        self.history = [landing_page(role)]
        return self.current

    def set_role(self, role: Optional[Role]) -> Page:
        """Apply a sign-in or sign-out and re-guard the current page."""

        self.role = role
        target = resolve(role, self.current)
        if target != self.current:
            self.history.append(target)
        return self.current
