"""TLS trust configuration for the Bitbucket transport."""

import os
import ssl

from bitbucket_provider.logging import get_logger

logger = get_logger("tls")


def build_ssl_context(ca_cert_path: str | None = None) -> ssl.SSLContext:
    """
    Build an SSL context trusting the system store plus an optional CA file.

    A missing CA file or one without parseable PEM certificates is logged
    at WARNING and the context falls back to the system trust store only.

    Args:
        ca_cert_path: Path to a PEM bundle to append to the trust store

    Returns:
        A client-side SSLContext
    """
    context = ssl.create_default_context()

    if not ca_cert_path:
        return context

    if not os.path.exists(ca_cert_path):
        logger.warning("'%s' does not exist, using system certs only", ca_cert_path)
        return context

    try:
        context.load_verify_locations(cafile=ca_cert_path)
    except (ssl.SSLError, OSError) as e:
        logger.warning(
            "No certs appended from %s, using system certs only: %s", ca_cert_path, e
        )
        # load_verify_locations may have appended some certs before failing
        return ssl.create_default_context()

    logger.debug("Appended CA certificates from %s", ca_cert_path)
    return context
