"""
Logging for the Bitbucket provider.

All provider loggers hang off ``bitbucket_provider``:

- ``bitbucket_provider.http``: one DEBUG line per request and response
- ``bitbucket_provider.tls``: CA bundle loading and fallbacks
- ``bitbucket_provider.reconcile``: state decisions and mutating calls

Credentials never reach the output: request headers and bodies pass
through ``safe_log_dict`` and free text through ``mask_sensitive_data``.
"""

import logging
import re
from typing import Any

ROOT_LOGGER_NAME = "bitbucket_provider"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
REDACTED = "[REDACTED]"

_root_logger = logging.getLogger(ROOT_LOGGER_NAME)
_http_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.http")
_reconcile_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.reconcile")

_CREDENTIAL_PATTERNS = (
    # Authorization header values
    (re.compile(r"\b(Bearer|Basic)\s+[\w.~+/=-]+", re.IGNORECASE), rf"\1 {REDACTED}"),
    # key: "value" / key="value" pairs for credential-like keys
    (
        re.compile(
            r"(token|secret|password|api_key)(['\"]?)\s*[:=]\s*(['\"])[^'\"]*\3",
            re.IGNORECASE,
        ),
        rf"\1\2: {REDACTED}",
    ),
)

_CREDENTIAL_KEYS = frozenset(
    {"authorization", "token", "secret", "password", "api_key", "credentials"}
)


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    reconcile_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str = DEFAULT_FORMAT,
) -> None:
    """
    Attach a handler to the provider loggers and set their levels.

    Calling this again replaces the handler installed by the previous call
    instead of stacking a second one.

    Args:
        level: Level for ``bitbucket_provider`` and every child logger
        http_level: Override for ``bitbucket_provider.http``
        reconcile_level: Override for ``bitbucket_provider.reconcile``
        handler: Where records go (stderr when omitted)
        format_string: ``logging.Formatter`` format

    Example:
        ```python
        import logging
        from bitbucket_provider.logging import configure_logging

        # Reconciler decisions at INFO, every HTTP exchange at DEBUG
        configure_logging(http_level=logging.DEBUG)
        ```
    """
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string))

    for existing in list(_root_logger.handlers):
        if getattr(existing, "_bitbucket_provider", False):
            _root_logger.removeHandler(existing)
    handler._bitbucket_provider = True  # type: ignore[attr-defined]
    _root_logger.addHandler(handler)

    _root_logger.setLevel(level)
    _http_logger.setLevel(level if http_level is None else http_level)
    _reconcile_logger.setLevel(level if reconcile_level is None else reconcile_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``bitbucket_provider`` or its ``name`` child (e.g. "http")."""
    if not name:
        return _root_logger
    return _root_logger.getChild(name)


def mask_sensitive_data(text: str) -> str:
    """Replace bearer/basic credentials and quoted secrets in ``text``."""
    for pattern, replacement in _CREDENTIAL_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: set[str] | frozenset[str] | None = None
) -> dict[str, Any]:
    """
    Copy ``data`` with credential values replaced by "[REDACTED]".

    A key is sensitive when any of ``sensitive_keys`` occurs in it,
    ignoring case, so "X-Api-Token" is caught by "token". Nested dicts,
    including dicts inside lists, are masked too.

    Args:
        data: Headers or a JSON body
        sensitive_keys: Key fragments to mask (defaults to authorization,
            token, secret, password, api_key and credentials)
    """
    keys = _CREDENTIAL_KEYS if sensitive_keys is None else sensitive_keys
    return {
        key: REDACTED if _is_sensitive(key, keys) else _masked_value(value, keys)
        for key, value in data.items()
    }


def _is_sensitive(key: str, keys: set[str] | frozenset[str]) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in keys)


def _masked_value(value: Any, keys: set[str] | frozenset[str]) -> Any:
    if isinstance(value, dict):
        return safe_log_dict(value, keys)
    if isinstance(value, list):
        return [_masked_value(item, keys) for item in value]
    return value


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: Any = None,
) -> None:
    """Log an outgoing request at DEBUG with credentials masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    message = f"--> {method} {url}"
    if headers:
        message += f" headers={safe_log_dict(dict(headers))}"
    if isinstance(body, dict):
        message += f" body={safe_log_dict(body)}"
    _http_logger.debug(message)


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log a response status at DEBUG.

    Only the status line is logged; response bodies never are.
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    if elapsed_ms is None:
        _http_logger.debug("<-- %d %s", status_code, url)
    else:
        _http_logger.debug("<-- %d %s (%.1fms)", status_code, url, elapsed_ms)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
