"""
Pydantic schemas for the connect hub.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# State enums
# ═══════════════════════════════════════════════════════════════════════════════


class ConnectionState(str, Enum):
    """Remote ``connection_status`` values."""

    ACTIVE = "active"
    NEEDS_REAUTH = "needs_reauth"
    REVOKED = "revoked"


class ProviderConnectionState(str, Enum):
    """Drives the per-provider screen."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    MANAGE = "manage"
    NEEDS_REAUTH = "needs_reauth"


class Screen(str, Enum):
    CHECKING = "checking"
    LOGIN = "login"
    HUB = "hub"


class ExpiryLevel(str, Enum):
    URGENT = "urgent"
    INFO = "info"


# ═══════════════════════════════════════════════════════════════════════════════
# Host-platform session
# ═══════════════════════════════════════════════════════════════════════════════


class Session(BaseModel):
    """Identity returned by the session probe or login; other fields are kept as-is."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class LoginCredentials(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., alias="Email", min_length=3, max_length=255)
    password: str = Field(..., alias="Password", min_length=1, max_length=128)

    def to_payload(self) -> Dict[str, str]:
        """Body shape expected by ``/auth/public/login``."""
        return self.model_dump(by_alias=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Provider connection
# ═══════════════════════════════════════════════════════════════════════════════


class ConnectionStatus(BaseModel):
    """
    Snapshot of a provider's remote connection.

    Derived from the status endpoint and never edited locally; it is only
    replaced by a fresh probe or cleared on disconnect.
    """

    is_connected: bool = False
    connection_state: ConnectionState = ConnectionState.ACTIVE
    provider_user_name: Optional[str] = None
    provider_user_id: Optional[str] = None
    days_until_expiry: Optional[int] = None
    active_resource_count: Optional[int] = None


class ProviderUser(BaseModel):
    """Summary of the provider account returned by the code exchange."""

    model_config = ConfigDict(extra="allow")

    user_name: Optional[str] = None
    user_id: Optional[str] = None


class ConnectedAccount(BaseModel):
    """A page or location exposed by a provider."""

    account_id: str
    account_name: Optional[str] = None
    platform: Optional[str] = None
    is_active: bool = False
    account_token: Optional[str] = None

    @field_validator("account_id", mode="before")
    @classmethod
    def _coerce_account_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v


class ExpiryWarning(BaseModel):
    level: ExpiryLevel
    days_until_expiry: int
    text: str


# ═══════════════════════════════════════════════════════════════════════════════
# Views returned by the hub API
# ═══════════════════════════════════════════════════════════════════════════════


class ProviderView(BaseModel):
    provider: str
    display_name: str
    resource_noun: str
    state: ProviderConnectionState
    status: Optional[ConnectionStatus] = None
    provider_user: Optional[ProviderUser] = None
    accounts: List[ConnectedAccount] = Field(default_factory=list)
    selected: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    resource_error: Optional[str] = None
    resource_notice: Optional[str] = None
    expiry: Optional[ExpiryWarning] = None
    active_label: Optional[str] = None
    syncing: bool = False
    saving: bool = False
    disconnecting: bool = False


class HubView(BaseModel):
    screen: Screen
    session: Optional[Session] = None
    operator_name: Optional[str] = None
    error: Optional[str] = None
    logging_in: bool = False
    location: Optional[str] = None
    navigate_to: Optional[str] = None
    providers: List[ProviderView] = Field(default_factory=list)
