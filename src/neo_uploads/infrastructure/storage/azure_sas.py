"""Azure Blob Storage request signing.

ONLY Azure signatures - Shared Key authorization headers for blob REST
calls and read-only Shared Access Signature (SAS) URLs.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Mapping, Optional
from urllib.parse import quote, urlencode

SAS_VERSION = "2020-12-06"
API_VERSION = "2020-08-04"

DEFAULT_SAS_EXPIRY = 60 * 60


def blob_url(storage_account: str, container: str, blob_name: str) -> str:
    """Public URL of a blob."""
    return (
        f"https://{storage_account}.blob.core.windows.net/"
        f"{container}/{quote(blob_name, safe='/~')}"
    )


def rfc1123_now(now: Optional[datetime] = None) -> str:
    """``x-ms-date`` header value."""
    return format_datetime(now or datetime.now(timezone.utc), usegmt=True)


def _iso8601_z(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _sign(access_key: str, string_to_sign: str) -> str:
    digest = hmac.new(
        base64.b64decode(access_key),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def shared_key_authorization(
    method: str,
    storage_account: str,
    container: str,
    blob_name: str,
    access_key: str,
    headers: Mapping[str, str],
) -> str:
    """``Authorization`` header value for a blob request.

    ``headers`` are the request headers already set; every ``x-ms-*``
    header among them is signed.
    """
    lowered = {name.lower(): str(value).strip() for name, value in headers.items()}
    content_length = lowered.get("content-length", "")
    if content_length == "0":
        content_length = ""

    canonical_headers = "".join(
        f"{name}:{lowered[name]}\n"
        for name in sorted(lowered)
        if name.startswith("x-ms-")
    )
    canonical_resource = f"/{storage_account}/{container}/{blob_name}"

    string_to_sign = "\n".join([
        method.upper(),
        lowered.get("content-encoding", ""),
        lowered.get("content-language", ""),
        content_length,
        lowered.get("content-md5", ""),
        lowered.get("content-type", ""),
        "",  # Date (x-ms-date is used)
        lowered.get("if-modified-since", ""),
        lowered.get("if-match", ""),
        lowered.get("if-none-match", ""),
        lowered.get("if-unmodified-since", ""),
        lowered.get("range", ""),
    ]) + "\n" + canonical_headers + canonical_resource

    return f"SharedKey {storage_account}:{_sign(access_key, string_to_sign)}"


def generate_sas_token(
    storage_account: str,
    container: str,
    blob_name: str,
    access_key: str,
    expires_in: int = DEFAULT_SAS_EXPIRY,
    now: Optional[datetime] = None,
) -> str:
    """Read-only, https-only service SAS query string for one blob."""
    start = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expiry = start + timedelta(seconds=int(expires_in))
    permissions = "r"
    resource = "b"

    string_to_sign = "\n".join([
        permissions,
        _iso8601_z(start),
        _iso8601_z(expiry),
        f"/blob/{storage_account}/{container}/{blob_name}",
        "",  # signedIdentifier
        "",  # signedIP
        "https",
        SAS_VERSION,
        resource,
        "",  # signedSnapshotTime
        "",  # signedEncryptionScope
        "",  # rscc
        "",  # rscd
        "",  # rsce
        "",  # rscl
        "",  # rsct
    ])

    return urlencode({
        "sv": SAS_VERSION,
        "st": _iso8601_z(start),
        "se": _iso8601_z(expiry),
        "sr": resource,
        "sp": permissions,
        "spr": "https",
        "sig": _sign(access_key, string_to_sign),
    })


def generate_sas_url(
    storage_account: str,
    container: str,
    blob_name: str,
    access_key: str,
    expires_in: int = DEFAULT_SAS_EXPIRY,
    now: Optional[datetime] = None,
) -> str:
    """Blob URL carrying a read-only SAS token."""
    token = generate_sas_token(storage_account, container, blob_name, access_key, expires_in, now)
    return f"{blob_url(storage_account, container, blob_name)}?{token}"
