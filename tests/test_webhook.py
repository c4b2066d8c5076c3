#
# Tests for the external-dns webhook endpoints
#

import json
from unittest import TestCase
from unittest.mock import Mock

from externaldns_unbound import (
    Changes,
    DomainFilter,
    Endpoint,
    UnboundProvider,
    UnboundRecordNotFound,
)
from externaldns_unbound.webhook import MEDIA_TYPE, create_app

from test_provider import FakeUnboundAPI


class TestWebhook(TestCase):
    def setUp(self):
        self.provider = Mock()
        app = create_app(self.provider)
        app.config['TESTING'] = True
        self.client = app.test_client()

    def _post(self, path, data):
        return self.client.post(
            path,
            data=json.dumps(data),
            headers={'Content-Type': MEDIA_TYPE, 'Accept': MEDIA_TYPE},
        )

    def test_negotiate(self):
        self.provider.get_domain_filter.return_value = DomainFilter(
            ['example.com']
        )
        response = self.client.get('/', headers={'Accept': MEDIA_TYPE})
        self.assertEqual(200, response.status_code)
        self.assertEqual(MEDIA_TYPE, response.headers['Content-Type'])
        self.assertEqual({'include': ['example.com']}, response.get_json(True))

    def test_healthz(self):
        response = self.client.get('/healthz')
        self.assertEqual(200, response.status_code)
        self.assertEqual(b'ok', response.data)

    def test_records(self):
        self.provider.records.return_value = [
            Endpoint('a.example.com', 'A', ['127.0.0.1']),
            Endpoint('www.example.com', 'CNAME', ['a.example.com']),
        ]
        response = self.client.get('/records')
        self.assertEqual(200, response.status_code)
        self.assertEqual(MEDIA_TYPE, response.headers['Content-Type'])
        self.assertEqual(
            [
                {
                    'dnsName': 'a.example.com',
                    'targets': ['127.0.0.1'],
                    'recordType': 'A',
                },
                {
                    'dnsName': 'www.example.com',
                    'targets': ['a.example.com'],
                    'recordType': 'CNAME',
                },
            ],
            response.get_json(True),
        )

    def test_records_failure(self):
        self.provider.records.side_effect = UnboundRecordNotFound('boom')
        response = self.client.get('/records')
        self.assertEqual(500, response.status_code)
        self.assertEqual(b'boom', response.data)

    def test_apply_changes(self):
        response = self._post(
            '/records',
            {
                'Create': [
                    {
                        'dnsName': 'berkin.example.com',
                        'targets': ['127.0.0.1'],
                        'recordType': 'A',
                    }
                ]
            },
        )
        self.assertEqual(204, response.status_code)
        self.provider.apply_changes.assert_called_once()
        changes = self.provider.apply_changes.call_args[0][0]
        self.assertIsInstance(changes, Changes)
        self.assertEqual(
            [Endpoint('berkin.example.com', 'A', ['127.0.0.1'])],
            changes.create,
        )

    def test_apply_changes_failure(self):
        self.provider.apply_changes.side_effect = UnboundRecordNotFound(
            'failed to create host alias www.example.com'
        )
        response = self._post('/records', {'Create': []})
        self.assertEqual(500, response.status_code)
        self.assertIn(b'failed to create host alias', response.data)

    def test_apply_changes_bad_body(self):
        response = self.client.post('/records', data='not json')
        self.assertEqual(400, response.status_code)
        self.provider.apply_changes.assert_not_called()

        response = self._post('/records', {'Create': 'nope'})
        self.assertEqual(400, response.status_code)

    def test_adjust_endpoints(self):
        self.provider.adjust_endpoints.side_effect = lambda endpoints: [
            Endpoint(e.dns_name, e.record_type, e.targets[:1])
            for e in endpoints
        ]
        response = self._post(
            '/adjustendpoints',
            [
                {
                    'dnsName': 'a.example.com',
                    'targets': ['127.0.0.1', '127.0.0.2'],
                    'recordType': 'A',
                }
            ],
        )
        self.assertEqual(200, response.status_code)
        self.assertEqual(MEDIA_TYPE, response.headers['Content-Type'])
        self.assertEqual(
            [
                {
                    'dnsName': 'a.example.com',
                    'targets': ['127.0.0.1'],
                    'recordType': 'A',
                }
            ],
            response.get_json(True),
        )

    def test_adjust_endpoints_bad_body(self):
        response = self._post('/adjustendpoints', {'dnsName': 'a'})
        self.assertEqual(400, response.status_code)
        response = self._post('/adjustendpoints', ['a.example.com'])
        self.assertEqual(400, response.status_code)
        self.provider.adjust_endpoints.assert_not_called()

    def test_apply_changes_rejects_mistyped_fields(self):
        base = {
            'dnsName': 'berkin.example.com',
            'recordType': 'A',
            'targets': ['127.0.0.1'],
        }
        for key, value in (
            ('targets', '127.0.0.1'),
            ('targets', [1]),
            ('labels', 5),
            ('labels', ['owner']),
            ('providerSpecific', {'name': 'alias'}),
            ('recordTTL', '300'),
            ('dnsName', ['berkin.example.com']),
        ):
            endpoint = dict(base)
            endpoint[key] = value
            response = self._post('/records', {'Create': [endpoint]})
            self.assertEqual(400, response.status_code, (key, value))
        self.provider.apply_changes.assert_not_called()

    def test_adjust_endpoints_rejects_mistyped_fields(self):
        base = {
            'dnsName': 'a.example.com',
            'recordType': 'A',
            'targets': ['127.0.0.1'],
        }
        for key, value in (
            ('targets', '127.0.0.1'),
            ('labels', 5),
            ('providerSpecific', 'alias'),
        ):
            endpoint = dict(base)
            endpoint[key] = value
            response = self._post('/adjustendpoints', [endpoint])
            self.assertEqual(400, response.status_code, (key, value))
        self.provider.adjust_endpoints.assert_not_called()


class TestWebhookWithBackend(TestCase):
    def setUp(self):
        self.client = FakeUnboundAPI()
        app = create_app(UnboundProvider('test', client=self.client))
        app.config['TESTING'] = True
        self.http = app.test_client()

    def _post(self, path, data):
        return self.http.post(
            path,
            data=json.dumps(data),
            headers={'Content-Type': MEDIA_TYPE},
        )

    def test_string_targets_write_nothing(self):
        response = self._post(
            '/records',
            {
                'Create': [
                    {
                        'dnsName': 'berkin.example.com',
                        'recordType': 'A',
                        'targets': '127.0.0.1',
                    }
                ]
            },
        )
        self.assertEqual(400, response.status_code)
        self.assertEqual({}, self.client.host_overrides)
        self.assertEqual([], self.client.calls)

    def test_create_round_trip(self):
        response = self._post(
            '/records',
            {
                'Create': [
                    {
                        'dnsName': 'berkin.example.com',
                        'recordType': 'A',
                        'targets': ['127.0.0.1'],
                    }
                ]
            },
        )
        self.assertEqual(204, response.status_code)
        self.assertEqual(
            ['127.0.0.1'],
            [r.server for r in self.client.host_overrides.values()],
        )
