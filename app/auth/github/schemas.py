from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderProfile(BaseModel):
    """Normalized user profile returned by the identity provider."""

    email: Optional[str] = None
    fullname: Optional[str] = None


class AuthorizeResponse(BaseModel):
    redirect_uri: str = Field(..., alias="redirect-uri")

    model_config = ConfigDict(populate_by_name=True)
