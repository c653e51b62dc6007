"""
DoiT SDK - High-level client with nice ergonomics.

This layer provides a typed interface for the analytics resources.
Built on top of the core APIClient.
"""

import dataclasses
import logging
import urllib.parse
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from doit_console.core.client import API_PREFIX, DEFAULT_HOST_URL, DEFAULT_TIMEOUT, APIClient, DecodeError
from doit_console.core.config import Settings
from doit_console.core.types import Attribution, AttributionGroup, Report

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResourceKind(Generic[T]):
    """
    Describes one resource collection of the API.

    Attributes:
        name: Human name used in error messages (e.g., "attribution group")
        collection_path: Path segment under /analytics/v1
        parser: Builds a record from a response body, including any read-side projection
        read_suffix: Replaces the trailing "/" of the item path on reads

    """

    name: str
    collection_path: str
    parser: Callable[[dict[str, Any]], T]
    read_suffix: str = "/"

    def collection_url(self) -> str:
        return f"{API_PREFIX}/{self.collection_path}/"

    def item_url(self, resource_id: str, suffix: str = "/") -> str:
        quoted = urllib.parse.quote(resource_id, safe="")
        return f"{API_PREFIX}/{self.collection_path}/{quoted}{suffix}"


ATTRIBUTIONS = ResourceKind("attribution", "attributions", Attribution.from_dict)
ATTRIBUTION_GROUPS = ResourceKind("attribution group", "attributiongroups", AttributionGroup.from_dict)
REPORTS = ResourceKind("report", "reports", Report.from_dict, read_suffix="/config")


class DoitClient:
    """
    High-level DoiT Console API client with typed methods.

    Example:
        client = DoitClient(token, customer_context)

        created = client.attributions.create(Attribution(name="prod", formula="A", components=[...]))
        current = client.attributions.get(created.id)
        current = client.attributions.update_and_get(created.id, current)
        client.attributions.delete(created.id)

    """

    def __init__(
        self,
        token: str | None,
        customer_context: str | None,
        base_url: str | None = DEFAULT_HOST_URL,
        timeout: float = DEFAULT_TIMEOUT,
        opener: Any = None,
        verify: bool = True,
    ):
        """
        Initialize the DoiT client.

        Args:
            token: DoiT API token
            customer_context: Customer context attached to every request
            base_url: API host (None selects the production host)
            timeout: Request timeout in seconds
            opener: Transport override, mainly for tests
            verify: Issue the verification call before returning

        """
        self._client = APIClient(
            token=token,
            customer_context=customer_context,
            base_url=base_url,
            timeout=timeout,
            opener=opener,
            verify=verify,
        )

        # Sub-clients for each resource kind
        self.attributions = ResourceOperations(self._client, ATTRIBUTIONS)
        self.attribution_groups = ResourceOperations(self._client, ATTRIBUTION_GROUPS)
        self.reports = ResourceOperations(self._client, REPORTS)

    @classmethod
    def from_env(
        cls,
        host: str | None = None,
        api_token: str | None = None,
        customer_context: str | None = None,
        env: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> "DoitClient":
        """Build a client from DOIT_* environment variables, overridden by explicit values."""
        settings = Settings.resolve(host=host, api_token=api_token, customer_context=customer_context, env=env)
        return cls(
            token=settings.api_token,
            customer_context=settings.customer_context,
            base_url=settings.host,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._client.base_url

    @property
    def customer_context(self) -> str:
        return self._client.customer_context


# =============================================================================
# Resource Operations
# =============================================================================


class ResourceOperations(Generic[T]):
    """Create, read, update and delete for one resource kind."""

    def __init__(self, client: APIClient, kind: ResourceKind[T]):
        self._client = client
        self.kind = kind

    def _parse(self, data: Any, action: str) -> T:
        if not isinstance(data, dict):
            raise DecodeError(f"Could not {action}: expected a JSON object, got {type(data).__name__}")
        try:
            return self.kind.parser(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"Could not {action}: unexpected response shape: {e!r}")

    def create(self, record: Any) -> T:
        """
        Create a resource.

        Args:
            record: Record to create. Any id it carries is ignored by the server

        Returns:
            The created record with its server-assigned id

        """
        action = f"create {self.kind.name}"
        result = self._client.post(self.kind.collection_url(), record.to_dict(), action=action)
        created = self._parse(result, action)
        logger.debug("Created %s %s", self.kind.name, getattr(created, "id", ""))
        return created

    def get(self, resource_id: str) -> T:
        """
        Get a resource by ID.

        Args:
            resource_id: The resource ID

        Returns:
            The record, in the same shape used for create/update

        """
        action = f"read {self.kind.name} {resource_id}"
        result = self._client.get(self.kind.item_url(resource_id, self.kind.read_suffix), action=action)
        return self._parse(result, action)

    def update(self, resource_id: str, record: Any) -> T:
        """
        Update a resource.

        The PATCH response is not guaranteed to echo every field. Use
        update_and_get() when the authoritative state is needed.

        Args:
            resource_id: The resource ID
            record: Fields to send

        Returns:
            The record as echoed by the update endpoint. An empty body yields
            the sent record; an echo without an id gets resource_id

        """
        action = f"update {self.kind.name} {resource_id}"
        result = self._client.patch(self.kind.item_url(resource_id), record.to_dict(), action=action)
        if result is None:
            return dataclasses.replace(record, id=resource_id)
        if isinstance(result, dict) and not result.get("id"):
            result = {**result, "id": resource_id}
        return self._parse(result, action)

    def update_and_get(self, resource_id: str, record: Any) -> T:
        """
        Update a resource, then read it back.

        The PATCH response body is not inspected.

        Args:
            resource_id: The resource ID
            record: Fields to send

        Returns:
            The record as returned by a fresh read

        """
        self._client.patch(
            self.kind.item_url(resource_id),
            record.to_dict(),
            action=f"update {self.kind.name} {resource_id}",
            decode=False,
        )
        return self.get(resource_id)

    def delete(self, resource_id: str) -> None:
        """
        Delete a resource.

        Args:
            resource_id: The resource ID

        """
        self._client.delete(self.kind.item_url(resource_id), action=f"delete {self.kind.name} {resource_id}")
