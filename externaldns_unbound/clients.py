#
#
#

"""Protocol definition for the Unbound settings API.

This module defines structural typing (PEP 544) for the remote store the
provider reconciles against, allowing fakes and the HTTP client to be
used interchangeably without explicit inheritance.
"""

from typing import List, Protocol

from .records import HostAlias, HostOverride


class UnboundAPI(Protocol):
    """Protocol defining the operations the provider needs.

    Host overrides carry A records, host aliases carry CNAME records and
    reference a host override by ID.
    """

    def list_host_overrides(self) -> List[HostOverride]:
        """List all host overrides.

        Returns:
            Host overrides in backend order, with IDs populated
        """
        ...

    def create_host_override(self, record: HostOverride) -> HostOverride:
        """Create a host override.

        Args:
            record: Host override without an ID

        Returns:
            The created host override with its backend assigned ID
        """
        ...

    def update_host_override(self, record: HostOverride) -> None:
        """Overwrite the host override identified by ``record.id``."""
        ...

    def delete_host_override(self, record: HostOverride) -> None:
        """Delete the host override identified by ``record.id``."""
        ...

    def list_host_aliases(self, host_id: str) -> List[HostAlias]:
        """List the aliases attached to one host override.

        Args:
            host_id: Host override identifier

        Returns:
            Host aliases with ``host_id`` set to ``host_id``
        """
        ...

    def create_host_alias(self, record: HostAlias) -> HostAlias:
        """Create a host alias linked to ``record.host_id``.

        Returns:
            The created host alias with its backend assigned ID
        """
        ...

    def update_host_alias(self, record: HostAlias) -> None:
        """Overwrite the host alias identified by ``record.id``."""
        ...

    def delete_host_alias(self, record: HostAlias) -> None:
        """Delete the host alias identified by ``record.id``."""
        ...
