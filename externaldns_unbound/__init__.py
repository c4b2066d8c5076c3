#
#
#

import logging
from typing import Dict

from .endpoint import (
    RECORD_TYPE_A,
    RECORD_TYPE_CNAME,
    Changes,
    DomainFilter,
    Endpoint,
)
from .exceptions import (
    UnboundClientException,
    UnboundClientRejected,
    UnboundClientTransportError,
    UnboundClientUnauthorized,
    UnboundException,
    UnboundInvalidRecord,
    UnboundRecordNotFound,
)
from .strategies import (
    ApplyStrategy,
    HostAliasStrategy,
    HostOverrideStrategy,
    RecordIndex,
)

__version__ = '0.1.0'

__all__ = [
    'UnboundProvider',
    'Changes',
    'DomainFilter',
    'Endpoint',
    'UnboundException',
    'UnboundClientException',
    'UnboundClientRejected',
    'UnboundClientTransportError',
    'UnboundClientUnauthorized',
    'UnboundInvalidRecord',
    'UnboundRecordNotFound',
]


class UnboundProvider(object):
    def __init__(
        self,
        id,
        base_url=None,
        api_key=None,
        api_secret=None,
        domain_filter=None,
        client=None,
        **kwargs,
    ):
        self.log = logging.getLogger(f'UnboundProvider[{id}]')
        self.log.debug(
            '__init__: id=%s, base_url=%s, api_key=***, api_secret=***, '
            'domain_filter=%s',
            id,
            base_url,
            domain_filter,
        )
        self.id = id
        self._domain_filter = list(domain_filter or [])

        # An injected client wins over connection settings
        if client is None:
            client = self._create_client(
                base_url, api_key, api_secret, **kwargs
            )
        self._client = client
        self._strategies = self._create_strategies()

    def _create_client(self, base_url, api_key, api_secret, **kwargs):
        """Factory method for client creation.

        Args:
            base_url: OPNsense base URL, e.g. https://192.168.1.1
            api_key: API key, used as the basic auth user
            api_secret: API secret, used as the basic auth password
            **kwargs: ``verify`` and ``timeout`` passed to the client

        Returns:
            Unbound API client instance

        Raises:
            ValueError: If a connection setting is missing
        """
        missing = [
            name
            for name, value in (
                ('base_url', base_url),
                ('api_key', api_key),
                ('api_secret', api_secret),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f'Missing connection settings: {", ".join(missing)}'
            )

        from .api_client import UnboundClient

        return UnboundClient(base_url, api_key, api_secret, **kwargs)

    def _create_strategies(self) -> Dict[str, ApplyStrategy]:
        """Factory method for the per record type apply strategies."""
        return {
            RECORD_TYPE_A: HostOverrideStrategy(self.log),
            RECORD_TYPE_CNAME: HostAliasStrategy(self.log),
        }

    def _strategy_for(self, op, endpoint):
        strategy = self._strategies.get(endpoint.record_type)
        if strategy is None:
            self.log.warning(
                '%s: skipping unsupported %s record %s',
                op,
                endpoint.record_type,
                endpoint.dns_name,
            )
        return strategy

    def records(self):
        self.log.debug('records:')
        try:
            host_overrides = self._client.list_host_overrides()
        except UnboundException:
            self.log.error('records: failed to list host overrides')
            raise

        ret = []
        for host_override in host_overrides:
            ret.append(host_override.endpoint())
            try:
                host_aliases = self._client.list_host_aliases(host_override.id)
            except UnboundException:
                self.log.error(
                    'records: failed to list host aliases of %s', host_override
                )
                raise
            for host_alias in host_aliases:
                ret.append(host_alias.endpoint())

        self.log.info(
            'records:   found %d records, host_overrides=%d',
            len(ret),
            len(host_overrides),
        )
        return ret

    def adjust_endpoints(self, endpoints):
        for endpoint in endpoints:
            # Host overrides hold exactly one address
            if endpoint.record_type == RECORD_TYPE_A and endpoint.targets:
                endpoint.targets = endpoint.targets[:1]
        return endpoints

    def get_domain_filter(self):
        return DomainFilter(self._domain_filter)

    def apply_changes(self, changes):
        self.log.debug(
            'apply_changes: len(create)=%d, len(update)=%d, len(delete)=%d',
            len(changes.create),
            len(changes.update_new),
            len(changes.delete),
        )
        if not changes.has_changes():
            self.log.debug('apply_changes:   no changes')
            return

        if len(changes.update_old) != len(changes.update_new):
            raise UnboundException(
                f'mismatched update pairs: {len(changes.update_old)} old, '
                f'{len(changes.update_new)} new'
            )

        try:
            index = RecordIndex.load(self._client)
        except UnboundException:
            self.log.error('apply_changes: failed to load current records')
            raise
        self.log.debug('apply_changes:   loaded %s', index)

        for endpoint in changes.delete:
            strategy = self._strategy_for('apply_delete', endpoint)
            if strategy is not None:
                strategy.apply_delete(self._client, index, endpoint)

        for endpoint in changes.create:
            strategy = self._strategy_for('apply_create', endpoint)
            if strategy is not None:
                strategy.apply_create(self._client, index, endpoint)

        # Record type changes are expected to arrive as delete + create, the
        # old endpoint's type selects the strategy
        for old, new in zip(changes.update_old, changes.update_new):
            strategy = self._strategy_for('apply_update', old)
            if strategy is not None:
                strategy.apply_update(self._client, index, old, new)
