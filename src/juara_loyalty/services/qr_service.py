"""QR encoding of member codes."""

from __future__ import annotations

import base64
import io
import logging

import qrcode

logger = logging.getLogger(__name__)

# 1x1 transparent PNG served when encoding fails.
PLACEHOLDER_PNG = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def encode_member_code(member_code: str) -> tuple[str, bool]:
    """Return ``(data_url, placeholder)`` for a member code."""

    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_H,
            box_size=10,
            border=4,
        )
        qr.add_data(member_code)
        qr.make(fit=True)

        img = qr.make_image(fill_color="#78350f", back_color="white")
        img_buffer = io.BytesIO()
        img.save(img_buffer, format="PNG")
        img_str = base64.b64encode(img_buffer.getvalue()).decode()
        return f"data:image/png;base64,{img_str}", False
    except Exception:
        logger.exception("failed to encode QR for %s", member_code)
        return f"data:image/png;base64,{PLACEHOLDER_PNG}", True
