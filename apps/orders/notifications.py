"""
Order notifications.

Receivers for the lifecycle signals. Every event is logged. Admins get a
Telegram message through the Bot HTTP API when a payment needs review and
when an order is settled; customers get their license key by email when an
order is approved for EMAIL delivery. Delivery failures are logged and never
propagate back into the request.
"""

import logging

import requests
from django.conf import settings
from django.core.mail import send_mail
from django.dispatch import receiver
from django.utils.html import escape

from .models import DeliveryMethod
from .signals import (
    order_created,
    order_payment_confirmed,
    order_approved,
    order_rejected,
    order_expired,
)

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


def _format_vnd(amount):
    return f"{amount:,}".replace(',', '.') + 'đ'


def send_admin_telegram(text: str) -> bool:
    """
    Post ``text`` (HTML) to the admin chat.

    Returns:
        True if Telegram accepted the message, False if skipped or failed
    """
    token = settings.TELEGRAM_BOT_TOKEN
    chat_id = settings.TELEGRAM_ADMIN_CHAT_ID
    if not token or not chat_id:
        logger.debug("Telegram not configured, skipping admin notification")
        return False

    try:
        response = requests.post(
            TELEGRAM_API_URL.format(token=token),
            data={
                'chat_id': chat_id,
                'text': text,
                'parse_mode': 'HTML',
                'disable_web_page_preview': 'true',
            },
            timeout=settings.TELEGRAM_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error("Telegram admin notification failed: %s", e)
        return False

    return True


def send_license_email(order, license) -> bool:
    """Email the license key to ``order.delivery_contact``."""
    subject = f"License for order {order.order_number}"
    lines = [
        f"Xin chào {order.user.get_display_name()},",
        "",
        f"Đơn hàng {order.order_number} ({order.package_name}) đã được xác nhận.",
        "",
        f"License key: {license.license_key}",
        f"Số thiết bị: {license.max_devices}",
        f"Hiệu lực đến: {license.end_date:%d/%m/%Y}",
    ]
    if settings.LICENSE_DOWNLOAD_URL:
        lines += ["", f"Tải ứng dụng: {settings.LICENSE_DOWNLOAD_URL}"]
    lines += ["", f"Hỗ trợ: {settings.SUPPORT_TELEGRAM_URL}"]

    try:
        send_mail(
            subject,
            "\n".join(lines),
            settings.DEFAULT_FROM_EMAIL,
            [order.delivery_contact],
        )
    except Exception:
        logger.exception("License email for order %s failed", order.order_number)
        return False

    logger.info("License email for order %s sent to %s", order.order_number, order.delivery_contact)
    return True


@receiver(order_created)
def on_order_created(sender, order, **kwargs):
    logger.info(
        "[order_created] %s user=%s amount=%s memo=%r",
        order.order_number, order.user_id, order.amount, order.transfer_content
    )


@receiver(order_payment_confirmed)
def on_payment_confirmed(sender, order, **kwargs):
    logger.info("[order_payment_confirmed] %s awaiting admin review", order.order_number)
    send_admin_telegram(
        "💰 <b>Payment to verify</b>\n"
        f"Order: <code>{escape(order.order_number)}</code>\n"
        f"Customer: {escape(order.user.email)}\n"
        f"Package: {escape(order.package_name)}\n"
        f"Amount: <b>{_format_vnd(order.amount)}</b>\n"
        f"Memo: <code>{escape(order.transfer_content)}</code>"
    )


@receiver(order_approved)
def on_order_approved(sender, order, license, admin=None, **kwargs):
    logger.info(
        "[order_approved] %s deliver license via %s to %s",
        order.order_number, order.delivery_method, order.delivery_contact
    )

    if order.delivery_method == DeliveryMethod.EMAIL:
        send_license_email(order, license)

    send_admin_telegram(
        "✅ <b>Order approved</b>\n"
        f"Order: <code>{escape(order.order_number)}</code>\n"
        f"License: <code>{escape(license.license_key)}</code>\n"
        f"Deliver via {escape(order.get_delivery_method_display())}: {escape(order.delivery_contact)}"
    )


@receiver(order_rejected)
def on_order_rejected(sender, order, reason='', **kwargs):
    logger.info("[order_rejected] %s reason=%r", order.order_number, reason)
    send_admin_telegram(
        "❌ <b>Order rejected</b>\n"
        f"Order: <code>{escape(order.order_number)}</code>\n"
        f"Reason: {escape(reason)}"
    )


@receiver(order_expired)
def on_order_expired(sender, order, **kwargs):
    logger.info("[order_expired] %s", order.order_number)
