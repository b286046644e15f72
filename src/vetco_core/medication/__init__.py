"""
Medication schedule helpers: the QR payload codec and schedule codes.
"""

from .qr import (
    QR_PAYLOAD_TYPE,
    QR_PAYLOAD_VERSION,
    build_qr_payload,
    encode_qr_payload,
    generate_schedule_code,
    is_schedule_code,
    parse_qr_code,
    try_parse_qr_code,
)

__all__ = [
    "QR_PAYLOAD_TYPE",
    "QR_PAYLOAD_VERSION",
    "build_qr_payload",
    "encode_qr_payload",
    "parse_qr_code",
    "try_parse_qr_code",
    "generate_schedule_code",
    "is_schedule_code",
]
