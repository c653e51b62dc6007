"""
Settings resolution for the DoiT client.

Values come from the DOIT_* environment variables; explicit values override them.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from doit_console.core.client import ConfigurationError

ENV_HOST = "DOIT_HOST"
ENV_API_TOKEN = "DOIT_API_TOKEN"
ENV_CUSTOMER_CONTEXT = "DOIT_CUSTOMER_CONTEXT"


@dataclass(frozen=True)
class Settings:
    """Resolved connection settings."""

    host: str
    api_token: str
    customer_context: str

    @classmethod
    def resolve(
        cls,
        host: str | None = None,
        api_token: str | None = None,
        customer_context: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "Settings":
        """
        Resolve settings from the environment, overridden by explicit values.

        Args:
            host: API host (overrides DOIT_HOST)
            api_token: API token (overrides DOIT_API_TOKEN)
            customer_context: Customer context (overrides DOIT_CUSTOMER_CONTEXT)
            env: Environment mapping, defaults to os.environ

        Returns:
            Settings with every value set

        Raises:
            ConfigurationError: If any value is missing or empty. The host has
                no fallback here, even though the client has a default.

        """
        env = os.environ if env is None else env

        resolved = {
            "host": host if host is not None else env.get(ENV_HOST, ""),
            "api_token": api_token if api_token is not None else env.get(ENV_API_TOKEN, ""),
            "customer_context": (
                customer_context if customer_context is not None else env.get(ENV_CUSTOMER_CONTEXT, "")
            ),
        }

        missing = [
            (name, var)
            for name, var in (
                ("host", ENV_HOST),
                ("api_token", ENV_API_TOKEN),
                ("customer_context", ENV_CUSTOMER_CONTEXT),
            )
            if not resolved[name]
        ]
        if missing:
            names = ", ".join(f"{name} ({var})" for name, var in missing)
            raise ConfigurationError(
                f"Missing DoiT settings: {names}. Set them explicitly or through the environment.",
                details={"missing": [name for name, _ in missing]},
            )

        return cls(**resolved)

    def __repr__(self) -> str:
        return f"Settings(host={self.host!r}, api_token='***', customer_context={self.customer_context!r})"
