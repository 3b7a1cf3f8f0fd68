"""TLS-only entry point: ``secure-payments`` or ``python -m secure_payments.server``."""

import logging
import os
import ssl

from secure_payments.errors import ConfigurationError
from secure_payments.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _require_file(path):
    if not path or not os.path.isfile(path):
        raise ConfigurationError(f'SSL file not found: {path}')
    return path


def build_ssl_context(cert_path, key_path, ca_path=''):
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.load_cert_chain(_require_file(cert_path), _require_file(key_path))
    if ca_path:
        context.load_verify_locations(_require_file(ca_path))
    return context


def main():
    from secure_payments import create_app
    from secure_payments.config import Config

    setup_logging(Config.LOG_LEVEL, Config.LOG_FORMAT)
    app = create_app()
    config = app.config
    context = build_ssl_context(config['SSL_CERT_PATH'], config['SSL_KEY_PATH'], config['SSL_CA_PATH'])
    logger.info("Secure API listening on https://%s:%s", config['HOST'], config['PORT'])
    app.run(host=config['HOST'], port=config['PORT'], ssl_context=context)


if __name__ == '__main__':
    main()
