"""One-legged OAuth 1.0a (HMAC-SHA1) request signing.

WooCommerce authenticates server-to-server calls with only a consumer key and
secret, so the token secret part of the signing key is always empty.
"""

import base64
import hashlib
import hmac
import secrets
import time
from urllib.parse import quote

from yarl import URL

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"


def percent_encode(value: object) -> str:
    """RFC 3986 encoding: everything but unreserved characters is escaped."""
    return quote(str(value), safe="")


def base_string_uri(url: URL) -> str:
    """Scheme and host lowercased, default port dropped, no query or fragment."""
    scheme = url.scheme.lower()
    host = (url.raw_host or "").lower()
    if url.port is not None and not url.is_default_port():
        host = f"{host}:{url.port}"
    return f"{scheme}://{host}{url.raw_path}"


def normalize_parameters(params: list[tuple[str, str]]) -> str:
    encoded = sorted((percent_encode(key), percent_encode(value)) for key, value in params)
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(method: str, url: URL, oauth_params: dict[str, str]) -> str:
    params = list(url.query.items()) + list(oauth_params.items())
    return "&".join(
        [
            method.upper(),
            percent_encode(base_string_uri(url)),
            percent_encode(normalize_parameters(params)),
        ]
    )


def sign(
    url: str | URL,
    method: str,
    consumer_key: str,
    consumer_secret: str,
    *,
    nonce: str | None = None,
    timestamp: int | None = None,
) -> str:
    """
    Build the Authorization header value for a request.

    Args:
        url: Full request URL, including the query string that will be sent
        method: HTTP method of the request
        consumer_key: WooCommerce consumer key
        consumer_secret: WooCommerce consumer secret
        nonce: Fixed nonce (random when omitted)
        timestamp: Fixed Unix timestamp (current time when omitted)

    Returns:
        The ``OAuth ...`` header value
    """
    url = URL(url) if isinstance(url, str) else url

    oauth_params = {
        "oauth_consumer_key": consumer_key,
        "oauth_nonce": nonce or secrets.token_hex(16),
        "oauth_signature_method": SIGNATURE_METHOD,
        "oauth_timestamp": str(int(time.time()) if timestamp is None else timestamp),
        "oauth_version": OAUTH_VERSION,
    }

    base_string = signature_base_string(method, url, oauth_params)
    key = f"{percent_encode(consumer_secret)}&"
    digest = hmac.new(key.encode(), base_string.encode(), hashlib.sha1).digest()
    oauth_params["oauth_signature"] = base64.b64encode(digest).decode()

    header_params = ", ".join(
        f'{percent_encode(name)}="{percent_encode(value)}"' for name, value in sorted(oauth_params.items())
    )
    return f"OAuth {header_params}"
