"""User and credential Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class GenerateKeyRequest(BaseModel):
    """Registration request carrying only the display name."""

    moniker: str = Field("", description="Display name; need not be unique")


class GenerateKeyResponse(BaseModel):
    """Freshly issued key pair. The private key is never shown again."""

    success: bool = True
    moniker: str
    public_key: str = Field(..., alias="publicKey")
    private_key: str = Field(..., alias="privateKey")

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    """Login submission carrying the bearer private key."""

    private_key: str = Field("", alias="privateKey", description="Private key issued at registration")

    model_config = ConfigDict(populate_by_name=True)


class CurrentUserResponse(BaseModel):
    """Public identity of the logged-in user."""

    moniker: str
    public_key: str = Field(..., alias="publicKey")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
