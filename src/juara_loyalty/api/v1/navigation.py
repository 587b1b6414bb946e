"""Page-routing resolution for clients."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...schemas import NavigationResolution
from ...services import navigation_service
from ...services.auth_service import AuthContext
from ...services.navigation_service import Page
from ..deps import get_optional_auth_context

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("/resolve", response_model=NavigationResolution, summary="Resolve a page for the caller's role")
def resolve_page(
    page: Page = Query(..., description="Requested page identifier"),
    context: Optional[AuthContext] = Depends(get_optional_auth_context),
) -> NavigationResolution:
    role = context.role if context else None
    target = navigation_service.resolve(role, page)
    return NavigationResolution(
        role=navigation_service.role_key(role),
        requested=page.value,
        page=target.value,
        redirected=target != page,
        permitted=sorted(p.value for p in navigation_service.permitted_pages(role)),
    )
