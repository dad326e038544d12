from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.hateoas import HypermediaDocument


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class PersonBase(BaseModel):
    """Base person fields shared across schemas"""
    first_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Person's first name"
    )
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Person's last name"
    )
    email: str = Field(
        ...,
        max_length=255,
        pattern=r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$',
        description="Person's email address",
        examples=["email@domain.com"]
    )


class PersonUpdate(BaseModel):
    """Update person information"""
    first_name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Updated first name"
    )
    last_name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Updated last name"
    )
    email: Optional[str] = Field(
        None,
        max_length=255,
        pattern=r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$',
        description="Updated email address"
    )

    @field_validator('first_name', 'last_name', 'email')
    @classmethod
    def reject_empty_strings(cls, v: Optional[str]) -> Optional[str]:
        """Ensure if provided, fields are not empty strings"""
        if v is not None and v.strip() == "":
            raise ValueError("Field cannot be empty string")
        return v


class PersonQuery(BaseModel):
    """Query string accepted by the people collection"""
    search: Optional[str] = Field(
        None,
        description="Search by name or email"
    )
    sort_by: str = Field(
        "last_name",
        alias="sortBy",
        description="Sort field"
    )
    skip: int = Field(0, ge=0, description="Number of records to skip")
    limit: int = Field(100, ge=1, le=1000, description="Maximum number of records to return")

    model_config = ConfigDict(populate_by_name=True)


class PersonRead(PersonBase, HypermediaDocument):
    """Person data returned to clients"""
    id: int = Field(
        ...,
        description="Unique identifier for this person"
    )

    model_config = ConfigDict(from_attributes=True)


class PersonCollection(HypermediaDocument):
    items: list[PersonRead] = Field(
        default_factory=list,
        description="People on this page"
    )


class ApiRoot(HypermediaDocument):
    message: str = Field(
        ...,
        description="Welcome message"
    )
