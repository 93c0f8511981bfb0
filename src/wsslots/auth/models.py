"""
Authentication Models

Identity of the caller after JWT verification.
"""

from typing import List
from pydantic import BaseModel, Field, ConfigDict


class UserContext(BaseModel):
    """
    Authenticated user context derived from a verified JWT.
    """

    username: str = Field(
        ...,
        min_length=1,
        description="Wiki username performing the edit.",
    )

    roles: List[str] = Field(
        default_factory=list,
        description="List of wiki user groups (roles).",
    )

    scopes: List[str] = Field(
        default_factory=list,
        description="Granted operations, e.g. 'read', 'edit', 'create'.",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes
