"""
Discord request signature verification (Ed25519).
"""

import logging

from typing import Optional

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def verify_signature(
    public_key_hex: str,
    signature_hex: Optional[str],
    timestamp: Optional[str],
    body: bytes,
) -> bool:
    """
    Check a request signature against the application's public key.

    The signed message is the timestamp header followed by the raw body bytes.
    Missing headers, malformed hex and bad signatures all return False.
    """
    if not signature_hex or not timestamp:
        return False

    try:
        verify_key = VerifyKey(bytes.fromhex(public_key_hex))
        verify_key.verify(timestamp.encode() + body, bytes.fromhex(signature_hex))
        return True
    except BadSignatureError:
        return False
    except ValueError as e:
        # nacl raises ValueError subclasses for wrong key/signature lengths
        logger.warning(f"Signature verification error: {e}")
        return False
