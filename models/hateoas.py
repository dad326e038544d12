from typing import Dict, Optional

from pydantic import BaseModel, Field, SerializeAsAny

from models.link import Link


class HypermediaDocument(BaseModel):
    """Base for response models that carry links keyed by rel ("self", "update", ...)"""
    links: Optional[Dict[str, SerializeAsAny[Link]]] = Field(
        None,
        description="HATEOAS links for available actions"
    )
