"""
Versioned payload carried by medication schedule QR codes.

The QR text is JSON of the form::

    {"type": "VETCO_MEDICATION_SCHEDULE", "version": "1.0", "data": {...}}

Only payloads whose ``type`` matches exactly are accepted. Rendering the
payload as an image is left to the client.
"""

import json
import logging
import secrets
import string
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..exceptions import QRCodeException
from ..schemas.medication import MedicationScheduleQR
from ..utils.datetime_utils import get_current_utc, to_epoch_millis

logger = logging.getLogger(__name__)

QR_PAYLOAD_TYPE = "VETCO_MEDICATION_SCHEDULE"
QR_PAYLOAD_VERSION = "1.0"
SCHEDULE_CODE_PREFIX = "VETCO_"

_BASE36 = string.digits + string.ascii_lowercase


def build_qr_payload(data: MedicationScheduleQR) -> Dict[str, Any]:
    """Wrap schedule data in the typed, versioned envelope."""
    return {
        "type": QR_PAYLOAD_TYPE,
        "version": QR_PAYLOAD_VERSION,
        "data": data.model_dump(by_alias=True, exclude_none=True),
    }


def encode_qr_payload(data: MedicationScheduleQR) -> str:
    """Serialize schedule data to the JSON text encoded in the QR image."""
    return json.dumps(build_qr_payload(data), separators=(",", ":"))


def parse_qr_code(raw: str) -> MedicationScheduleQR:
    """
    Decode scanned QR text into schedule data.

    Args:
        raw: Text decoded from the QR image

    Returns:
        The ``data`` section of the payload

    Raises:
        QRCodeException: If the text is not JSON, the type does not match
            exactly, or the data section is incomplete
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise QRCodeException("QR code does not contain JSON", original_error=e)

    if not isinstance(payload, dict):
        raise QRCodeException("QR code payload must be a JSON object")

    payload_type = payload.get("type")
    if payload_type != QR_PAYLOAD_TYPE:
        raise QRCodeException(
            "Invalid QR code type", payload_type=str(payload_type)
        )

    version = payload.get("version")
    if version != QR_PAYLOAD_VERSION:
        logger.info(f"Accepting medication QR payload with version {version!r}")

    try:
        return MedicationScheduleQR.model_validate(payload.get("data"))
    except ValidationError as e:
        raise QRCodeException(
            "QR code schedule data is incomplete",
            payload_type=payload_type,
            original_error=e,
        )


def try_parse_qr_code(raw: str) -> Optional[MedicationScheduleQR]:
    """Like ``parse_qr_code`` but returns None on failure."""
    try:
        return parse_qr_code(raw)
    except QRCodeException as e:
        logger.warning(f"Rejected QR code: {e.message}")
        return None


def generate_schedule_code(now: Optional[datetime] = None) -> str:
    """
    Generate the unique lookup code stored on a schedule.

    Format is ``VETCO_<epoch milliseconds>_<9 base-36 characters>``.
    """
    millis = to_epoch_millis(now or get_current_utc())
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{SCHEDULE_CODE_PREFIX}{millis}_{suffix}"


def is_schedule_code(raw: str) -> bool:
    """True for a bare schedule code rather than a JSON payload."""
    return raw.strip().startswith(SCHEDULE_CODE_PREFIX)
