#
#
#

"""Flask application serving the external-dns webhook protocol.

- ``GET /`` negotiates and returns the domain filter
- ``GET /records`` lists the current endpoints
- ``POST /records`` applies a batch of changes
- ``POST /adjustendpoints`` normalizes endpoints before planning
- ``GET /healthz`` is the liveness probe
"""

import json
import logging

from flask import Flask, Response, request

from .endpoint import Changes, Endpoint
from .exceptions import UnboundException

MEDIA_TYPE = 'application/external.dns.webhook+json;version=1'

_HTTP_NO_CONTENT = 204
_HTTP_BAD_REQUEST = 400
_HTTP_INTERNAL_SERVER_ERROR = 500

log = logging.getLogger('UnboundWebhook')


def _webhook_response(data, status=200):
    return Response(json.dumps(data), status=status, mimetype=MEDIA_TYPE)


def _text_response(message, status):
    return Response(message, status=status, mimetype='text/plain')


def _request_json():
    # external-dns sends its vendor media type, not application/json
    return request.get_json(force=True, silent=True)


def create_app(provider):
    app = Flask(__name__)

    @app.errorhandler(UnboundException)
    def unbound_error(e):
        log.error('%s %s failed: %s', request.method, request.path, e)
        return _text_response(str(e), _HTTP_INTERNAL_SERVER_ERROR)

    @app.route('/', methods=['GET'])
    def negotiate():
        return _webhook_response(provider.get_domain_filter().to_json())

    @app.route('/healthz', methods=['GET'])
    def healthz():
        return _text_response('ok', 200)

    @app.route('/records', methods=['GET'])
    def records():
        return _webhook_response([e.to_json() for e in provider.records()])

    @app.route('/records', methods=['POST'])
    def apply_changes():
        data = _request_json()
        try:
            changes = Changes.from_json(data)
        except ValueError as e:
            log.warning('apply_changes: bad request body: %s', e)
            return _text_response(str(e), _HTTP_BAD_REQUEST)
        provider.apply_changes(changes)
        return Response(status=_HTTP_NO_CONTENT)

    @app.route('/adjustendpoints', methods=['POST'])
    def adjust_endpoints():
        data = _request_json()
        if not isinstance(data, list):
            return _text_response(
                'expected a list of endpoints', _HTTP_BAD_REQUEST
            )
        try:
            endpoints = [Endpoint.from_json(e) for e in data]
        except ValueError as e:
            log.warning('adjust_endpoints: bad request body: %s', e)
            return _text_response(str(e), _HTTP_BAD_REQUEST)
        adjusted = provider.adjust_endpoints(endpoints)
        return _webhook_response([e.to_json() for e in adjusted])

    return app
