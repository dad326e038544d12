from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class Link(BaseModel):
    """A hypermedia link; the base shape every link factory produces."""
    href: Optional[str] = Field(
        None,
        description="Link target: base URL followed by the URL path",
        examples=["https://api.example.com/people/1"]
    )

    # response models are re-validated from dumped dicts; extra keeps the
    # members of subclasses such as HttpLink
    model_config = ConfigDict(frozen=True, extra="allow")


class HttpLink(Link):
    """Link extended with the HTTP method and URI-template flag of its route"""
    method: Optional[str] = Field(
        None,
        description="HTTP method the target route answers to",
        examples=["GET", "POST", "PATCH", "DELETE"]
    )
    templated: Optional[bool] = Field(
        None,
        description="Present and true only when href is a URI template"
    )
