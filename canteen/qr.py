"""
QR codes for menu items. The scanner page reads "MENU_ITEM_ID:<id>" and opens that item.
Uses qrcode library.
"""
import io

import qrcode

from canteen.constants import MENU_QR_PREFIX


def menu_item_qr_payload(menu_item):
    return f'{MENU_QR_PREFIX}{menu_item.pk}'


def parse_menu_item_qr_payload(payload):
    """Return the menu item id encoded in a scanned payload, or None if it is not ours."""
    payload = (payload or '').strip()
    if not payload.startswith(MENU_QR_PREFIX):
        return None
    raw = payload[len(MENU_QR_PREFIX):]
    return int(raw) if raw.isdigit() else None


def generate_menu_item_qr_png(menu_item):
    """Return PNG bytes for the menu item's QR code."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(menu_item_qr_payload(menu_item))
    qr.make(fit=True)
    img = qr.make_image(fill_color='black', back_color='white')
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    buffer.seek(0)
    return buffer.getvalue()
