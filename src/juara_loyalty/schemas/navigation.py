"""Schemas for page-routing resolution."""

from pydantic import BaseModel


class NavigationResolution(BaseModel):
    role: str
    requested: str
    page: str
    redirected: bool
    permitted: list[str]
