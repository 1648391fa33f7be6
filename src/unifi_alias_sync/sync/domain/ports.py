"""Port interfaces for alias sync operations.

Ports define the contracts between the use cases and the infrastructure.
These are abstract base classes that adapters must implement.

Following the Hexagonal Architecture (Ports and Adapters) pattern:
- Ports are interfaces defined in the domain layer
- Adapters implement these ports in the adapters layer
- Use cases depend only on ports, not concrete implementations
"""

from abc import ABC, abstractmethod

from .entities import Client, Site


class IInventoryClient(ABC):
    """Port for the controller's device inventory.

    Client and alias calls operate on the site chosen with
    ``select_site()``, which must be called first for each site.
    """

    @abstractmethod
    async def list_sites(self) -> list[Site]:
        """Enumerate every site visible to the authenticated session.

        Returns:
            Sites with a non-empty name, in controller order
        """
        ...

    @abstractmethod
    def select_site(self, name: str) -> None:
        """Set the site context for subsequent client and alias calls.

        Args:
            name: Site name (the short id used in API paths)
        """
        ...

    @abstractmethod
    async def list_clients(self) -> list[Client]:
        """Enumerate every known client of the selected site.

        Returns:
            Client entities including their current alias, if any
        """
        ...

    @abstractmethod
    async def set_alias(self, client_id: str, alias: str) -> bool:
        """Set a client's alias in the selected site.

        Args:
            client_id: Site-scoped client record id
            alias: Alias to assign

        Returns:
            True on success; on failure see ``last_error_message``
        """
        ...

    @property
    @abstractmethod
    def last_error_message(self) -> str:
        """Human-readable reason for the most recent failure."""
        ...

    @abstractmethod
    async def end_session(self) -> None:
        """Release the authenticated session."""
        ...
