#
#
#

import argparse
import logging
import os
import sys

from . import UnboundProvider
from .api_client import DEFAULT_TIMEOUT
from .webhook import create_app

log = logging.getLogger('externaldns_unbound')

DEFAULT_BASE_URL = 'https://192.168.1.1'
DEFAULT_LISTEN = ':8888'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

_TRUE = ('1', 'true', 'yes', 'on')


def _env_flag(environ, name):
    return environ.get(name, '').strip().lower() in _TRUE


def _split_domains(values):
    ret = []
    for value in values:
        ret.extend(d.strip() for d in value.split(','))
    return [d for d in ret if d]


def parse_listen(listen):
    host, sep, port = listen.rpartition(':')
    if not sep:
        host, port = '', listen
    try:
        port = int(port)
    except ValueError:
        raise ValueError(f'invalid listen address {listen!r}') from None
    return host or '0.0.0.0', port


def _parse_args(argv, environ):
    parser = argparse.ArgumentParser(
        description='external-dns webhook provider for OPNsense Unbound'
    )
    parser.add_argument(
        '--base-url',
        default=environ.get('UNBOUND_BASE_URL') or DEFAULT_BASE_URL,
        help='OPNsense API base URL (UNBOUND_BASE_URL)',
    )
    parser.add_argument(
        '--api-key',
        default=environ.get('UNBOUND_API_KEY'),
        help='OPNsense API key (UNBOUND_API_KEY)',
    )
    parser.add_argument(
        '--api-secret',
        default=environ.get('UNBOUND_API_SECRET'),
        help='OPNsense API secret (UNBOUND_API_SECRET)',
    )
    parser.add_argument(
        '--domains',
        action='append',
        default=[],
        help='Domain filter, can be used multiple times. foo.com means '
        'foo.com and anything that ends in .foo.com (UNBOUND_DOMAIN_FILTER, '
        'comma separated)',
    )
    parser.add_argument(
        '--insecure',
        action='store_true',
        default=_env_flag(environ, 'UNBOUND_INSECURE'),
        help='Skip TLS certificate verification, OPNsense ships a '
        'self-signed certificate (UNBOUND_INSECURE)',
    )
    parser.add_argument(
        '--timeout',
        default=environ.get('UNBOUND_TIMEOUT') or DEFAULT_TIMEOUT,
        help='Request timeout in seconds (UNBOUND_TIMEOUT)',
    )
    parser.add_argument(
        '--listen',
        default=environ.get('UNBOUND_LISTEN') or DEFAULT_LISTEN,
        help='Webhook listen address (UNBOUND_LISTEN)',
    )
    parser.add_argument(
        '--log-level',
        default=environ.get('UNBOUND_LOG_LEVEL') or 'INFO',
        choices=LOG_LEVELS,
        type=str.upper,
        help='Log level (UNBOUND_LOG_LEVEL)',
    )
    args = parser.parse_args(argv)

    if not args.domains:
        args.domains = [environ.get('UNBOUND_DOMAIN_FILTER', '')]
    args.domains = _split_domains(args.domains)

    return args


def main(argv=None, environ=None):
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    args = _parse_args(argv, environ)
    # Environment defaults bypass argparse's choices and type checks
    log_level = args.log_level if args.log_level in LOG_LEVELS else 'INFO'
    logging.basicConfig(
        level=getattr(logging, log_level),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
    )
    if log_level != args.log_level:
        log.error(
            '--log-level or UNBOUND_LOG_LEVEL must be one of %s, got %s',
            ', '.join(LOG_LEVELS),
            args.log_level,
        )
        return 1

    try:
        timeout = float(args.timeout)
    except ValueError:
        timeout = 0
    if timeout <= 0:
        log.error(
            '--timeout or UNBOUND_TIMEOUT must be a positive number, got %s',
            args.timeout,
        )
        return 1

    for flag, env, value in (
        ('--base-url', 'UNBOUND_BASE_URL', args.base_url),
        ('--api-key', 'UNBOUND_API_KEY', args.api_key),
        ('--api-secret', 'UNBOUND_API_SECRET', args.api_secret),
    ):
        if not value:
            log.error('%s or %s is required', flag, env)
            return 1

    try:
        host, port = parse_listen(args.listen)
    except ValueError as e:
        log.error('%s', e)
        return 1

    provider = UnboundProvider(
        'webhook',
        args.base_url,
        args.api_key,
        args.api_secret,
        domain_filter=args.domains,
        verify=not args.insecure,
        timeout=timeout,
    )
    app = create_app(provider)

    log.info('main: listening on %s:%d', host, port)
    # Reconciliation calls must not interleave
    app.run(host=host, port=port, threaded=False)
    return 0


if __name__ == '__main__':
    sys.exit(main())
