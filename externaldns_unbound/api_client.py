#
#
#

import logging

from requests import RequestException, Session

from . import __version__ as package_version
from .exceptions import (
    UnboundClientRejected,
    UnboundClientTransportError,
    UnboundClientUnauthorized,
)
from .records import HostAlias, HostOverride, Validations

DEFAULT_TIMEOUT = 10


class UnboundClient(object):
    SETTINGS_PATH = '/api/unbound/settings'

    def __init__(
        self,
        base_url,
        api_key,
        api_secret,
        verify=True,
        timeout=DEFAULT_TIMEOUT,
    ):
        self.log = logging.getLogger('UnboundClient')
        session = Session()
        session.auth = (api_key, api_secret)
        session.verify = verify
        session.headers.update(
            {
                'Content-Type': 'application/json;charset=UTF-8',
                'User-Agent': f'externaldns-unbound/{package_version}',
            }
        )
        self._session = session
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout

    def _do(self, path, data):
        url = f'{self._base_url}{self.SETTINGS_PATH}{path}'
        try:
            response = self._session.request(
                'POST', url, json=data, timeout=self._timeout
            )
        except RequestException as e:
            self.log.error('_do: request failed, path=%s: %s', path, e)
            raise UnboundClientTransportError(f'request failed: {e}') from e
        if response.status_code == 401:
            raise UnboundClientUnauthorized()
        if response.status_code != 200:
            self.log.error(
                '_do: request failed, path=%s, status=%d',
                path,
                response.status_code,
            )
            raise UnboundClientRejected(
                f'request failed: {response.status_code}'
            )
        try:
            data = response.json()
        except ValueError as e:
            self.log.error('_do: failed to decode response, path=%s', path)
            raise UnboundClientTransportError(
                f'failed to deserialize response: {e}'
            ) from e
        if not isinstance(data, dict):
            raise UnboundClientTransportError(
                f'unexpected response body: {data!r}'
            )
        return data

    def _do_mutation(self, op, path, data, expected, record):
        res = self._do(path, data)
        result = res.get('result')
        if result != expected:
            validations = Validations.from_response(res.get('validations'))
            self.log.error(
                '%s failed: record=%s, result=%s, validations=%s',
                op,
                record,
                result,
                validations,
            )
            raise UnboundClientRejected(
                f'{op} failed: {result}', result, validations
            )
        return res

    def _created(self, op, res, record):
        uuid = res.get('uuid')
        if not uuid:
            self.log.error(
                '%s failed: record=%s, no uuid in response', op, record
            )
            raise UnboundClientRejected(
                f'{op} failed: missing uuid', res.get('result')
            )
        created = record.copy()
        created.id = uuid
        return created

    def _search(self, path, data):
        data = dict(data, current=1, rowCount=-1)
        return self._do(path, data).get('rows') or []

    # --- Host overrides ---------------------------------------------------

    def _host_override_body(self, record):
        return {
            'host': {
                'enabled': '1',
                'hostname': record.hostname,
                'domain': record.domain,
                'rr': 'A',
                'mxprio': '',
                'mx': '',
                'server': record.server,
                'description': '',
            }
        }

    def list_host_overrides(self):
        rows = self._search('/searchHostOverride/', {})
        return [
            HostOverride(
                row.get('hostname', ''),
                row.get('domain', ''),
                row.get('server', ''),
                id=row.get('uuid'),
            )
            for row in rows
        ]

    def create_host_override(self, record):
        op = 'addHostOverride'
        res = self._do_mutation(
            op,
            '/addHostOverride/',
            self._host_override_body(record),
            'saved',
            record,
        )
        return self._created(op, res, record)

    def update_host_override(self, record):
        self._do_mutation(
            'setHostOverride',
            f'/setHostOverride/{record.id}',
            self._host_override_body(record),
            'saved',
            record,
        )

    def delete_host_override(self, record):
        self._do_mutation(
            'delHostOverride',
            f'/delHostOverride/{record.id}',
            {},
            'deleted',
            record,
        )

    # --- Host aliases -----------------------------------------------------

    def _host_alias_body(self, record):
        return {
            'alias': {
                'enabled': '1',
                'host': record.host_id,
                'hostname': record.hostname,
                'domain': record.domain,
                'description': '',
            }
        }

    def list_host_aliases(self, host_id):
        rows = self._search('/searchHostAlias/', {'host': host_id})
        return [
            HostAlias(
                row.get('hostname', ''),
                row.get('domain', ''),
                row.get('host', ''),
                host_id=host_id,
                id=row.get('uuid'),
            )
            for row in rows
        ]

    def create_host_alias(self, record):
        op = 'addHostAlias'
        res = self._do_mutation(
            op,
            '/addHostAlias/',
            self._host_alias_body(record),
            'saved',
            record,
        )
        return self._created(op, res, record)

    def update_host_alias(self, record):
        self._do_mutation(
            'setHostAlias',
            f'/setHostAlias/{record.id}',
            self._host_alias_body(record),
            'saved',
            record,
        )

    def delete_host_alias(self, record):
        self._do_mutation(
            'delHostAlias',
            f'/delHostAlias/{record.id}',
            {},
            'deleted',
            record,
        )
