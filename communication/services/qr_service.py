# communication/services/qr_service.py
import base64
from io import BytesIO

import qrcode


def make_qr_data_url(data):
    """
    Render ``data`` as a QR code

    Returns:
        str: PNG image as a base64 data URL, ready for an <img> tag
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer)
    return f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode()}"
