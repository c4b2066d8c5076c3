#
#
#

"""external-dns value types and their webhook JSON form.

These mirror the orchestrator's own schema: the provider reads
``dns_name``, ``record_type`` and ``targets`` and builds new instances,
everything else is carried through untouched.
"""

from typing import Dict, List, Optional

RECORD_TYPE_A = 'A'
RECORD_TYPE_CNAME = 'CNAME'


def _typed(data, key, _type):
    # Missing and null values fall back to the type's empty value
    value = data.get(key)
    if value is None:
        return _type()
    if not isinstance(value, _type) or (
        _type is int and isinstance(value, bool)
    ):
        raise ValueError(
            f'{key} must be of type {_type.__name__}, got {value!r}'
        )
    return value


class Endpoint(object):
    def __init__(
        self,
        dns_name: str,
        record_type: str,
        targets: Optional[List[str]] = None,
        set_identifier: str = '',
        record_ttl: int = 0,
        labels: Optional[Dict[str, str]] = None,
        provider_specific: Optional[List[Dict]] = None,
    ):
        self.dns_name = dns_name
        self.record_type = record_type
        self.targets = list(targets or [])
        self.set_identifier = set_identifier
        self.record_ttl = record_ttl
        self.labels = dict(labels or {})
        self.provider_specific = list(provider_specific or [])

    @property
    def first_target(self) -> Optional[str]:
        return self.targets[0] if self.targets else None

    @classmethod
    def from_json(cls, data: Dict) -> 'Endpoint':
        if not isinstance(data, dict):
            raise ValueError(f'endpoint must be an object, got {data!r}')
        targets = _typed(data, 'targets', list)
        if not all(isinstance(t, str) for t in targets):
            raise ValueError(f'targets must be strings, got {targets!r}')
        return cls(
            _typed(data, 'dnsName', str),
            _typed(data, 'recordType', str),
            targets,
            set_identifier=_typed(data, 'setIdentifier', str),
            record_ttl=_typed(data, 'recordTTL', int),
            labels=_typed(data, 'labels', dict),
            provider_specific=_typed(data, 'providerSpecific', list),
        )

    def to_json(self) -> Dict:
        ret = {
            'dnsName': self.dns_name,
            'targets': list(self.targets),
            'recordType': self.record_type,
        }
        # Remaining keys are omitempty on the orchestrator side
        if self.set_identifier:
            ret['setIdentifier'] = self.set_identifier
        if self.record_ttl:
            ret['recordTTL'] = self.record_ttl
        if self.labels:
            ret['labels'] = dict(self.labels)
        if self.provider_specific:
            ret['providerSpecific'] = list(self.provider_specific)
        return ret

    def __eq__(self, other):
        if not isinstance(other, Endpoint):
            return NotImplemented
        return self.to_json() == other.to_json()

    def __repr__(self):
        return (
            f'Endpoint<{self.dns_name} {self.record_type} '
            f'{" ".join(self.targets)}>'
        )


class Changes(object):
    """One reconciliation batch.

    ``update_old`` and ``update_new`` are index aligned: ``update_old[i]``
    is replaced by ``update_new[i]``.
    """

    _KEYS = (
        ('create', 'Create'),
        ('update_old', 'UpdateOld'),
        ('update_new', 'UpdateNew'),
        ('delete', 'Delete'),
    )

    def __init__(
        self, create=None, update_old=None, update_new=None, delete=None
    ):
        self.create = list(create or [])
        self.update_old = list(update_old or [])
        self.update_new = list(update_new or [])
        self.delete = list(delete or [])

    def has_changes(self) -> bool:
        return bool(
            self.create or self.update_old or self.update_new or self.delete
        )

    @classmethod
    def from_json(cls, data: Dict) -> 'Changes':
        if not isinstance(data, dict):
            raise ValueError(f'changes must be an object, got {data!r}')
        kwargs = {}
        for attr, key in cls._KEYS:
            values = data.get(key)
            if values is None:
                values = data.get(key[0].lower() + key[1:])
            if values is None:
                values = []
            if not isinstance(values, list):
                raise ValueError(f'{key} must be a list, got {values!r}')
            kwargs[attr] = [Endpoint.from_json(v) for v in values]
        return cls(**kwargs)

    def to_json(self) -> Dict:
        return {
            key: [e.to_json() for e in getattr(self, attr)]
            for attr, key in self._KEYS
        }

    def __repr__(self):
        return (
            f'Changes<create={len(self.create)}, '
            f'update={len(self.update_new)}, delete={len(self.delete)}>'
        )


class DomainFilter(object):
    def __init__(self, filters=None):
        self.filters = list(filters or [])

    def to_json(self) -> Dict:
        return {'include': list(self.filters)}

    def __eq__(self, other):
        if not isinstance(other, DomainFilter):
            return NotImplemented
        return self.filters == other.filters

    def __repr__(self):
        return f'DomainFilter<{",".join(self.filters)}>'
