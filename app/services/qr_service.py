"""
QR Code Service
QR images pointing at the public verification page
"""

import base64
from io import BytesIO

import qrcode

from app.config import settings


def build_verification_url(certificate_number: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/verify/{certificate_number}"


def generate_qr_png(certificate_number: str) -> bytes:
    """PNG bytes of the verification QR code (high error correction)"""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=1,
    )
    qr.add_data(build_verification_url(certificate_number))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_data_url(certificate_number: str) -> str:
    """Base64 data URL suitable for an <img src> in the certificate HTML"""
    encoded = base64.b64encode(generate_qr_png(certificate_number)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
