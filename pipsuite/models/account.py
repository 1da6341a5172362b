"""Account and TagGroup data models."""

from pydantic import BaseModel, Field


class Account(BaseModel):
    """Represents a trading account."""

    id: str = Field(..., min_length=1, description="Account identifier")
    name: str = Field(..., min_length=1, description="Display name")
    currency: str = Field(default="USD", min_length=3, description="Account currency")
    balance: float = Field(default=0.0, description="Current balance")
    is_demo: bool = Field(default=False, description="Demo account flag")
    type: str = Field(default="Real", description="Account type label")

    model_config = {"frozen": True}


class TagGroup(BaseModel):
    """A named group of tags shown together in the journal."""

    name: str = Field(..., min_length=1, description="Group name")
    tags: list[str] = Field(default_factory=list, description="Tags in the group")

    model_config = {"frozen": True}
