"""Configuration loader for ipchttp transports."""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING, Literal

import httpx
from pydantic import BaseModel, Field, field_validator

from ipchttp.paths import get_config_path

if TYPE_CHECKING:
    from pathlib import Path

type ConnectTimeoutPolicyLiteral = Literal["ignore", "honor"]

CONNECT_TIMEOUT_POLICY_VALUES = frozenset({"ignore", "honor"})


class TransportConfig(BaseModel):
    """Tunables for a local HTTP transport.

    Timeouts are in seconds; ``None`` means the operation may block forever.
    """

    connect_timeout_policy: ConnectTimeoutPolicyLiteral = Field(
        default="ignore",
        description=(
            "ignore: connect to the local channel without a timeout; "
            "honor: apply connect_timeout to the channel connect"
        ),
    )
    connect_timeout: float | None = Field(default=None, ge=0)
    read_timeout: float | None = Field(default=None, ge=0)
    write_timeout: float | None = Field(default=None, ge=0)
    pool_timeout: float | None = Field(
        default=None,
        ge=0,
        description="Seconds to wait for the single local connection",
    )
    keepalive_expiry: float | None = Field(
        default=5.0,
        ge=0,
        description="Seconds an idle connection may be kept for reuse",
    )
    user_agent: str | None = Field(default=None, description="User-Agent header override")

    @field_validator("connect_timeout_policy", mode="before")
    @classmethod
    def validate_connect_timeout_policy(cls, value: object) -> str:
        """Coerce unknown policies to 'ignore'."""
        match value:
            case str() as policy if policy in CONNECT_TIMEOUT_POLICY_VALUES:
                return policy
            case _:
                pass
        return "ignore"

    @property
    def honors_connect_timeout(self) -> bool:
        return self.connect_timeout_policy == "honor"

    def timeout(self) -> httpx.Timeout:
        """Timeouts for the httpx client built from this configuration."""
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
            pool=self.pool_timeout,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> TransportConfig:
        """Load the ``[transport]`` table from a TOML file or use defaults."""
        if config_path is None:
            config_path = get_config_path()

        if config_path.exists():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            return cls.model_validate(data.get("transport", {}))

        return cls()


__all__ = ["CONNECT_TIMEOUT_POLICY_VALUES", "ConnectTimeoutPolicyLiteral", "TransportConfig"]
