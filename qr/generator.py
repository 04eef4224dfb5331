"""
QR code rendering for otpauth:// URIs.

Uses the ``qrcode`` library: SVG output through its path image factory,
PNG output through Pillow.
"""

import base64
import io
import logging

import qrcode
import qrcode.image.svg

logger = logging.getLogger(__name__)

QR_WIDTH = 300          # target PNG width in pixels
QR_BORDER = 2           # quiet zone, in modules


def generate_qr_code_svg(data: str) -> str:
    """
    Render ``data`` as an SVG QR code.

    Args:
        data: Text to encode, normally an otpauth URI.

    Returns:
        SVG document as a string.
    """
    img = qrcode.make(
        data,
        image_factory=qrcode.image.svg.SvgPathImage,
        border=QR_BORDER,
    )
    buf = io.BytesIO()
    img.save(buf)
    logger.debug("Rendered SVG QR code (%d bytes)", buf.tell())
    return buf.getvalue().decode("utf-8")


def generate_qr_code_base64(data: str) -> str:
    """
    Render ``data`` as a PNG QR code wrapped in a data URL.

    The box size is chosen so the image is close to ``QR_WIDTH`` pixels
    wide, never smaller than one pixel per module.

    Args:
        data: Text to encode, normally an otpauth URI.

    Returns:
        ``data:image/png;base64,...`` string.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        border=QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    qr.box_size = max(1, QR_WIDTH // (qr.modules_count + 2 * QR_BORDER))

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    logger.debug("Rendered PNG QR code (version %d)", qr.version)
    return f"data:image/png;base64,{encoded}"
