#
#
#

"""Apply strategies for the record types Unbound supports.

This module implements the Strategy pattern to handle the two entity
kinds behind the settings API:
- A records live in host overrides
- CNAME records live in host aliases, linked to a host override by ID

Both strategies work against a RecordIndex that is seeded from the
backend once per batch and updated after every successful mutation, so
later changes in a batch see the effects of earlier ones.
"""

from typing import Dict, Iterable, Protocol

from .clients import UnboundAPI
from .endpoint import Endpoint
from .exceptions import UnboundRecordNotFound
from .records import HostAlias, HostOverride


class RecordIndex(object):
    """Host overrides and host aliases keyed by full DNS name."""

    def __init__(
        self,
        host_overrides: Iterable[HostOverride] = (),
        host_aliases: Iterable[HostAlias] = (),
    ):
        self.host_overrides: Dict[str, HostOverride] = {
            r.dns_name: r for r in host_overrides
        }
        self.host_aliases: Dict[str, HostAlias] = {
            r.dns_name: r for r in host_aliases
        }

    @classmethod
    def load(cls, client: UnboundAPI) -> 'RecordIndex':
        host_overrides = client.list_host_overrides()
        host_aliases = []
        for host_override in host_overrides:
            host_aliases.extend(client.list_host_aliases(host_override.id))
        return cls(host_overrides, host_aliases)

    def __repr__(self):
        return (
            f'RecordIndex<host_overrides={len(self.host_overrides)}, '
            f'host_aliases={len(self.host_aliases)}>'
        )


class ApplyStrategy(Protocol):
    """Protocol for per record type change application.

    Each method either performs the remote mutation and updates the
    index, logs and skips a non-fatal miss, or raises.
    """

    def apply_create(
        self, client: UnboundAPI, index: RecordIndex, endpoint: Endpoint
    ) -> None:
        """Apply a create.

        Args:
            client: Unbound API client
            index: Record index for the current batch
            endpoint: Desired endpoint
        """
        ...

    def apply_update(
        self,
        client: UnboundAPI,
        index: RecordIndex,
        old: Endpoint,
        new: Endpoint,
    ) -> None:
        """Apply an update pair.

        Args:
            client: Unbound API client
            index: Record index for the current batch
            old: Endpoint as currently published, used for the lookup
            new: Endpoint to publish in its place
        """
        ...

    def apply_delete(
        self, client: UnboundAPI, index: RecordIndex, endpoint: Endpoint
    ) -> None:
        """Apply a delete.

        Args:
            client: Unbound API client
            index: Record index for the current batch
            endpoint: Endpoint to remove
        """
        ...


class HostOverrideStrategy:
    """Strategy for A records.

    A missing host override is never fatal: deletes and updates of an
    unknown name are logged and skipped.
    """

    def __init__(self, log):
        self.log = log

    def apply_create(self, client, index, endpoint):
        record = HostOverride.from_endpoint(endpoint)
        try:
            record = client.create_host_override(record)
        except Exception:
            self.log.error(
                'apply_create: failed to create host override %s', record
            )
            raise
        self.log.info('apply_create: created %s', record)
        index.host_overrides[record.dns_name] = record

    def apply_update(self, client, index, old, new):
        existing = index.host_overrides.get(old.dns_name)
        if existing is None:
            self.log.warning(
                'apply_update: host override %s not found, skipping',
                old.dns_name,
            )
            return
        record = existing.copy()
        record.update(new)
        try:
            client.update_host_override(record)
        except Exception:
            self.log.error(
                'apply_update: failed to update host override %s', record
            )
            raise
        self.log.info('apply_update: updated %s', record)
        del index.host_overrides[old.dns_name]
        index.host_overrides[record.dns_name] = record

    def apply_delete(self, client, index, endpoint):
        record = index.host_overrides.get(endpoint.dns_name)
        if record is None:
            self.log.warning(
                'apply_delete: host override %s not found, skipping',
                endpoint.dns_name,
            )
            return
        try:
            client.delete_host_override(record)
        except Exception:
            self.log.error(
                'apply_delete: failed to delete host override %s', record
            )
            raise
        self.log.info('apply_delete: deleted %s', record)
        del index.host_overrides[endpoint.dns_name]


class HostAliasStrategy:
    """Strategy for CNAME records.

    An alias must point at a host override known to the index, its ID
    becomes the alias's foreign key. Unlike host overrides, updating an
    alias that cannot be found is fatal.
    """

    def __init__(self, log):
        self.log = log

    def _target_host_override(self, index, endpoint, verb):
        host_override = index.host_overrides.get(endpoint.first_target)
        if host_override is None:
            self.log.warning(
                'apply_%s: target host override %s not found for host alias %s',
                verb,
                endpoint.first_target,
                endpoint.dns_name,
            )
            raise UnboundRecordNotFound(
                f'failed to {verb} host alias {endpoint.dns_name}: target '
                f'host override {endpoint.first_target} not found'
            )
        return host_override

    def apply_create(self, client, index, endpoint):
        host_override = self._target_host_override(
            index, endpoint, 'create'
        )
        record = HostAlias.from_endpoint(endpoint, host_override.id)
        try:
            record = client.create_host_alias(record)
        except Exception:
            self.log.error(
                'apply_create: failed to create host alias %s', record
            )
            raise
        self.log.info('apply_create: created %s', record)
        index.host_aliases[record.dns_name] = record

    def apply_update(self, client, index, old, new):
        existing = index.host_aliases.get(old.dns_name)
        if existing is None:
            self.log.warning(
                'apply_update: host alias %s not found', old.dns_name
            )
            raise UnboundRecordNotFound(f'host alias {old.dns_name} not found')
        host_override = self._target_host_override(index, new, 'update')
        record = existing.copy()
        record.update(new)
        record.host_id = host_override.id
        try:
            client.update_host_alias(record)
        except Exception:
            self.log.error(
                'apply_update: failed to update host alias %s', record
            )
            raise
        self.log.info('apply_update: updated %s', record)
        del index.host_aliases[old.dns_name]
        index.host_aliases[record.dns_name] = record

    def apply_delete(self, client, index, endpoint):
        record = index.host_aliases.get(endpoint.dns_name)
        if record is None:
            self.log.warning(
                'apply_delete: host alias %s not found, skipping',
                endpoint.dns_name,
            )
            return
        try:
            client.delete_host_alias(record)
        except Exception:
            self.log.error(
                'apply_delete: failed to delete host alias %s', record
            )
            raise
        self.log.info('apply_delete: deleted %s', record)
        del index.host_aliases[endpoint.dns_name]
