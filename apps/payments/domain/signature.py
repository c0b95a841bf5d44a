"""
Webhook signature verification.

The gateway signs each notification with
``sha512(order_id + status_code + gross_amount + server_key)`` rendered as
lowercase hex. ``gross_amount`` must be the exact string the gateway sent
("25000.00", not a re-formatted number), otherwise valid notifications are
rejected.
"""

import hashlib
import hmac


def compute_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
    raw = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(raw.encode('utf-8')).hexdigest()


def verify_signature(order_id: str, status_code: str, gross_amount: str,
                     server_key: str, signature: str) -> bool:
    """True when ``signature`` matches the digest of the other inputs"""
    if not signature or not server_key:
        return False
    expected = compute_signature(order_id, status_code, gross_amount, server_key)
    return hmac.compare_digest(expected, signature.strip().lower())
