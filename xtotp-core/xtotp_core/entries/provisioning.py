"""
Provisioning URIs
=================
Import and export of credential entries as otpauth://totp/ URIs.
"""

import base64
import binascii
from typing import Optional
from urllib.parse import parse_qs, quote, unquote, urlencode, urlparse

from ..exceptions import ValidationError
from .models import (
    CredentialEntry,
    DEFAULT_DIGITS,
    DEFAULT_STEP_SECONDS,
    TotpAlgorithm,
)


def decode_base32_secret(secret: str) -> bytes:
    """
    Decode a base32 secret as shown by authenticator setup screens.
    
    Spaces, lowercase letters and missing '=' padding are tolerated.
    """
    cleaned = secret.strip().replace(" ", "").replace("-", "").upper().rstrip("=")
    if not cleaned:
        raise ValidationError("Secret is empty", field="shared_secret")
    cleaned += "=" * ((-len(cleaned)) % 8)
    try:
        return base64.b32decode(cleaned)
    except (binascii.Error, ValueError):
        raise ValidationError("Secret is not valid base32", field="shared_secret") from None


def encode_base32_secret(secret: bytes) -> str:
    return base64.b32encode(secret).decode("ascii").rstrip("=")


def _single(params: dict, key: str) -> Optional[str]:
    values = params.get(key)
    if not values:
        return None
    return values[0]


def _int_param(params: dict, key: str, default: int) -> int:
    raw = _single(params, key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Parameter {key!r} must be an integer, got {raw!r}", field=key) from None


def parse_otpauth_uri(uri: str) -> CredentialEntry:
    """
    Build a credential entry from an otpauth://totp/ URI.
    
    The label becomes the entry name. When the label carries no issuer
    prefix but an issuer parameter is present, the name is "Issuer:Account".
    Whitespace around the label colon is dropped ("A : b" imports as "A:b").
    
    Args:
        uri: e.g. otpauth://totp/GitHub:alice?secret=JBSWY3DPEHPK3PXP&digits=6
        
    Returns:
        A validated CredentialEntry
    """
    parsed = urlparse(uri.strip())
    if parsed.scheme != "otpauth":
        raise ValidationError(f"Not an otpauth URI: scheme {parsed.scheme!r}")
    if parsed.netloc.lower() != "totp":
        raise ValidationError(f"Unsupported OTP type: {parsed.netloc!r}")
    
    params = parse_qs(parsed.query)
    label = unquote(parsed.path.lstrip("/")).strip()
    issuer = _single(params, "issuer")
    
    if ":" in label:
        label_issuer, account = label.split(":", 1)
        name = f"{label_issuer.strip()}:{account.strip()}"
    elif issuer and label:
        name = f"{issuer.strip()}:{label}"
    else:
        name = label or (issuer or "").strip()
    
    secret = _single(params, "secret")
    if not secret:
        raise ValidationError("URI has no secret parameter", field="shared_secret")
    
    algorithm_name = _single(params, "algorithm")
    algorithm = (
        TotpAlgorithm.from_name(algorithm_name) if algorithm_name
        else TotpAlgorithm.HMAC_SHA1
    )
    
    return CredentialEntry(
        name=name,
        shared_secret=decode_base32_secret(secret),
        algorithm=algorithm,
        digit_count=_int_param(params, "digits", DEFAULT_DIGITS),
        step_seconds=_int_param(params, "period", DEFAULT_STEP_SECONDS),
    )


def build_otpauth_uri(entry: CredentialEntry, issuer: Optional[str] = None) -> str:
    """
    Export a credential entry as an otpauth://totp/ URI.
    
    When an issuer is given and the entry name carries no "Issuer:" prefix,
    the label becomes "Issuer:name", which is the name parse_otpauth_uri
    will produce on import. The URI contains the shared secret; treat it
    like the secret itself.
    """
    params = {
        "secret": encode_base32_secret(entry.shared_secret),
        "algorithm": entry.algorithm.short_name,
        "digits": entry.digit_count,
        "period": entry.step_seconds,
    }
    if issuer:
        params["issuer"] = issuer
    label = entry.name
    if issuer and ":" not in label:
        label = f"{issuer}:{label}"
    label = quote(label, safe=":@")
    return f"otpauth://totp/{label}?{urlencode(params, quote_via=quote)}"
