#
#
#

"""Unbound host overrides and host aliases.

A host override is a single-valued A record, a host alias is a CNAME that
the backend links to a host override through ``host_id``.
"""

from typing import Dict, List, Optional, Union

from .endpoint import RECORD_TYPE_A, RECORD_TYPE_CNAME, Endpoint
from .exceptions import UnboundInvalidRecord


def split_dns_name(dns_name: str):
    hostname, sep, domain = dns_name.partition('.')
    if not sep or not hostname or not domain:
        raise UnboundInvalidRecord(
            f'cannot split {dns_name!r} into hostname and domain'
        )
    return hostname, domain


def _first_target(endpoint: Endpoint) -> str:
    target = endpoint.first_target
    if not target:
        raise UnboundInvalidRecord(f'{endpoint.dns_name} has no targets')
    return target


class HostOverride(object):
    def __init__(
        self,
        hostname: str,
        domain: str,
        server: str,
        id: Optional[str] = None,
    ):
        self.id = id
        self.hostname = hostname
        self.domain = domain
        self.server = server

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> 'HostOverride':
        record = cls('', '', '')
        record.update(endpoint)
        return record

    @property
    def dns_name(self) -> str:
        return f'{self.hostname}.{self.domain}'

    def update(self, endpoint: Endpoint) -> None:
        server = _first_target(endpoint)
        self.hostname, self.domain = split_dns_name(endpoint.dns_name)
        self.server = server

    def endpoint(self) -> Endpoint:
        return Endpoint(self.dns_name, RECORD_TYPE_A, [self.server])

    def copy(self) -> 'HostOverride':
        return HostOverride(self.hostname, self.domain, self.server, id=self.id)

    def __eq__(self, other):
        if not isinstance(other, HostOverride):
            return NotImplemented
        return (self.id, self.hostname, self.domain, self.server) == (
            other.id,
            other.hostname,
            other.domain,
            other.server,
        )

    def __repr__(self):
        return f'HostOverride<{self.id} {self.dns_name} -> {self.server}>'


class HostAlias(object):
    def __init__(
        self,
        hostname: str,
        domain: str,
        host: str,
        host_id: Optional[str] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.hostname = hostname
        self.domain = domain
        # Full name of the host override this alias resolves to
        self.host = host
        self.host_id = host_id

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint, host_id: str) -> 'HostAlias':
        record = cls('', '', '', host_id=host_id)
        record.update(endpoint)
        return record

    @property
    def dns_name(self) -> str:
        return f'{self.hostname}.{self.domain}'

    def update(self, endpoint: Endpoint) -> None:
        host = _first_target(endpoint)
        self.hostname, self.domain = split_dns_name(endpoint.dns_name)
        self.host = host

    def endpoint(self) -> Endpoint:
        return Endpoint(self.dns_name, RECORD_TYPE_CNAME, [self.host])

    def copy(self) -> 'HostAlias':
        return HostAlias(
            self.hostname,
            self.domain,
            self.host,
            host_id=self.host_id,
            id=self.id,
        )

    def __eq__(self, other):
        if not isinstance(other, HostAlias):
            return NotImplemented
        return (
            self.id,
            self.hostname,
            self.domain,
            self.host,
            self.host_id,
        ) == (other.id, other.hostname, other.domain, other.host, other.host_id)

    def __repr__(self):
        return (
            f'HostAlias<{self.id} {self.dns_name} -> {self.host} '
            f'(host_id={self.host_id})>'
        )


class Validations(object):
    """Field level errors the backend attaches to a rejected mutation."""

    def __init__(self, fields: Dict[str, List[str]]):
        self.fields = fields

    @classmethod
    def from_response(
        cls, data: Union[Dict, List, None]
    ) -> Optional['Validations']:
        # The API sends an empty list rather than an empty object
        if not data or not isinstance(data, dict):
            return None
        fields = {}
        for field, messages in data.items():
            if isinstance(messages, (list, tuple)):
                fields[field] = [str(m) for m in messages]
            else:
                fields[field] = [str(messages)]
        return cls(fields)

    def __bool__(self):
        return bool(self.fields)

    def __str__(self):
        return '; '.join(
            f'{field}: {", ".join(messages)}'
            for field, messages in sorted(self.fields.items())
        )

    def __repr__(self):
        return f'Validations<{self}>'
