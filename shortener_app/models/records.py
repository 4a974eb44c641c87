"""
Serialized forms of values kept in the key-value store.
"""

from pydantic import BaseModel, Field


class LinkRecord(BaseModel):
    """
    Value stored under link:<shortName>, JSON-encoded.

    User records are not modelled here: their value is the raw token string.
    """

    url: str = Field(..., description="Target URL the short name redirects to")
    owner: str = Field("", description="Email of the creator, empty if anonymous")
