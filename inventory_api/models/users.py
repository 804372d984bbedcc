"""User models exposed by the auth router."""

from __future__ import annotations

from pydantic import BaseModel, Field


class User(BaseModel):
    id: int = Field(examples=[1], description="The ID of the user")
    name: str = Field(examples=["Jon Doe"], description="The name of the user")
