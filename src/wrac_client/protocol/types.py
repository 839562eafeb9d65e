"""Reply value types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AuthResult(str, Enum):
    """Outcome of an authenticated send."""

    OK = "ok"
    NO_USER = "no_user"
    BAD_PASS = "bad_pass"


class RegisterResult(str, Enum):
    """Outcome of a registration."""

    OK = "ok"
    USERNAME_TAKEN = "username_taken"


class ServerInfo(BaseModel):
    """Protocol version and server name reported by the server."""

    model_config = ConfigDict(frozen=True)

    version: int = Field(ge=0, le=255)
    name: str
