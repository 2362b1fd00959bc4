"""
Payment instructions for bank-transfer orders.

This module builds everything the checkout page shows next to a new order:
the receiving bank account, the exact amount, the transfer memo and two QR
codes for Vietnamese banking apps.

Classes:
    VietQRPaymentGenerator: Builds VietQR (NAPAS/EMVCo) payloads and images.

Example:
    Building the payment block for an order::

        from apps.orders.payments import build_payment_info

        payment = build_payment_info(order)
        payment['transferContent']   # 'VEO3 20260131 X7K2QP'
        payment['qrCode']            # 'data:image/png;base64,iVBOR...'
"""

import base64
from io import BytesIO
from urllib.parse import quote, urlencode

import qrcode
from django.conf import settings

# NAPAS application identifier and "transfer to account" service code
VIETQR_GUID = 'A000000727'
VIETQR_SERVICE_ACCOUNT = 'QRIBFTTA'
CURRENCY_VND = '704'
COUNTRY_VN = 'VN'
MAX_PURPOSE_LENGTH = 25


def crc16_ccitt(data: bytes) -> int:
    """CRC-16/CCITT-FALSE (poly 0x1021, init 0xFFFF) as required by EMVCo QR."""
    crc = 0xFFFF
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def _tlv(tag: str, value: str) -> str:
    return f"{tag}{len(value):02d}{value}"


class VietQRPaymentGenerator:
    """
    Generate VietQR codes for Vietnamese bank transfers.

    VietQR is the NAPAS profile of the EMVCo merchant-presented QR standard.
    Scanning the code in any Vietnamese banking app pre-fills the receiving
    account, amount and transfer description.

    Payload layout (tag, length, value)::

        00 02 01                      payload format
        01 02 12                      dynamic QR (amount included)
        38 .. 00 10 A000000727        NAPAS GUID
              01 .. 00 06 <bank BIN>
                    01 .. <account number>
              02 08 QRIBFTTA          transfer to account
        53 03 704                     VND
        54 .. <amount>
        58 02 VN
        62 .. 08 .. <transfer memo>
        63 04 <CRC16>

    Methods:
        generate_payload: Create the EMVCo payload string.
        generate_qr_image: Render a payload as a PIL image.
        generate_data_uri: Render a payload as a base64 PNG data URI.
        quick_link_url: img.vietqr.io image URL for the same transfer.
    """

    @staticmethod
    def generate_payload(bank_bin, account_number, amount, purpose=''):
        """
        Build a VietQR payload string.

        Args:
            bank_bin (str): 6-digit NAPAS bank identifier (e.g. '970422' for MB Bank).
            account_number (str): Receiving account number.
            amount (int): Amount in whole VND. Zero omits the amount field.
            purpose (str, optional): Transfer description. Only ASCII letters,
                digits and spaces are kept, truncated to 25 characters.

        Returns:
            str: Payload ending with its 4 hex digit CRC.
        """
        beneficiary = _tlv('00', bank_bin) + _tlv('01', account_number)
        merchant_info = (
            _tlv('00', VIETQR_GUID)
            + _tlv('01', beneficiary)
            + _tlv('02', VIETQR_SERVICE_ACCOUNT)
        )

        parts = [
            _tlv('00', '01'),
            _tlv('01', '12' if amount else '11'),
            _tlv('38', merchant_info),
            _tlv('53', CURRENCY_VND),
        ]
        if amount:
            parts.append(_tlv('54', str(int(amount))))
        parts.append(_tlv('58', COUNTRY_VN))

        clean_purpose = ''.join(
            c for c in purpose if c.isascii() and (c.isalnum() or c == ' ')
        )[:MAX_PURPOSE_LENGTH].strip()
        if clean_purpose:
            parts.append(_tlv('62', _tlv('08', clean_purpose)))

        payload = ''.join(parts) + '6304'
        return payload + f"{crc16_ccitt(payload.encode('ascii')):04X}"

    @staticmethod
    def generate_qr_image(payload):
        """
        Render ``payload`` as a QR code image.

        Uses error correction level M, like most banking apps expect.
        """
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        return qr.make_image(fill_color="black", back_color="white")

    @staticmethod
    def generate_data_uri(payload):
        """Return the QR code of ``payload`` as ``data:image/png;base64,...``."""
        image = VietQRPaymentGenerator.generate_qr_image(payload)
        buffer = BytesIO()
        image.save(buffer, format='PNG')
        encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
        return f"data:image/png;base64,{encoded}"

    @staticmethod
    def quick_link_url(bank_code, account_number, amount, purpose, account_name='', template='compact2'):
        """
        Build an img.vietqr.io Quick Link image URL.

        Format: ``https://img.vietqr.io/image/<BANK>-<ACCOUNT>-<TEMPLATE>.png?amount=..&addInfo=..``
        """
        query = {'amount': int(amount), 'addInfo': purpose}
        if account_name:
            query['accountName'] = account_name
        return (
            f"https://img.vietqr.io/image/{bank_code}-{account_number}-{template}.png?"
            + urlencode(query, quote_via=quote)
        )


def bank_info():
    """Receiving account from settings."""
    return {
        'bankName': settings.PAYMENT_BANK_NAME,
        'bankCode': settings.PAYMENT_BANK_CODE,
        'accountNumber': settings.PAYMENT_ACCOUNT_NUMBER,
        'accountName': settings.PAYMENT_ACCOUNT_NAME,
    }


def build_payment_info(order):
    """
    Payment block returned with a new order and by the order payment endpoint.

    Returns:
        dict with ``qrCode`` (data URI), ``bankInfo``, ``amount``,
        ``transferContent``, ``vietQRUrl`` and ``expiresAt``.
    """
    payload = VietQRPaymentGenerator.generate_payload(
        bank_bin=settings.PAYMENT_BANK_BIN,
        account_number=settings.PAYMENT_ACCOUNT_NUMBER,
        amount=order.amount,
        purpose=order.transfer_content,
    )

    return {
        'qrCode': VietQRPaymentGenerator.generate_data_uri(payload),
        'qrPayload': payload,
        'bankInfo': bank_info(),
        'amount': order.amount,
        'currency': order.currency,
        'transferContent': order.transfer_content,
        'vietQRUrl': VietQRPaymentGenerator.quick_link_url(
            bank_code=settings.PAYMENT_BANK_CODE,
            account_number=settings.PAYMENT_ACCOUNT_NUMBER,
            amount=order.amount,
            purpose=order.transfer_content,
            account_name=settings.PAYMENT_ACCOUNT_NAME,
        ),
        'expiresAt': order.expires_at,
    }
