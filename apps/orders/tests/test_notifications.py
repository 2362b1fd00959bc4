from smtplib import SMTPException
from unittest.mock import patch

import pytest
import requests
from django.test import override_settings

from apps.orders.models import OrderStatus, DeliveryMethod
from apps.orders.notifications import send_admin_telegram
from apps.orders.services import confirm_payment, approve_order, reject_order


TELEGRAM = dict(TELEGRAM_BOT_TOKEN='123:abc', TELEGRAM_ADMIN_CHAT_ID='-1001')


class TestAdminTelegram:

    @override_settings(TELEGRAM_BOT_TOKEN='', TELEGRAM_ADMIN_CHAT_ID='')
    def test_skipped_when_unconfigured(self):
        with patch('apps.orders.notifications.requests.post') as post:
            assert send_admin_telegram('hello') is False

        post.assert_not_called()

    @override_settings(**TELEGRAM, TELEGRAM_TIMEOUT_SECONDS=3)
    def test_posts_to_bot_api(self):
        with patch('apps.orders.notifications.requests.post') as post:
            assert send_admin_telegram('<b>hello</b>') is True

        args, kwargs = post.call_args
        assert args[0] == 'https://api.telegram.org/bot123:abc/sendMessage'
        assert kwargs['data']['chat_id'] == '-1001'
        assert kwargs['data']['parse_mode'] == 'HTML'
        assert kwargs['timeout'] == 3

    @override_settings(**TELEGRAM)
    def test_failure_is_swallowed(self):
        with patch(
            'apps.orders.notifications.requests.post',
            side_effect=requests.exceptions.ConnectionError('down'),
        ):
            assert send_admin_telegram('hello') is False


@pytest.mark.django_db
class TestLifecycleNotifications:

    @override_settings(**TELEGRAM)
    def test_payment_confirmation_alerts_admins(self, user, pending_order, django_capture_on_commit_callbacks):
        with patch('apps.orders.notifications.requests.post') as post:
            with django_capture_on_commit_callbacks(execute=True):
                confirm_payment(order_id=pending_order.id, user=user)

        post.assert_called_once()
        text = post.call_args.kwargs['data']['text']
        assert pending_order.order_number in text
        assert pending_order.transfer_content in text
        assert '1.199.000đ' in text

    def test_no_notification_before_commit(self, user, pending_order):
        with patch('apps.orders.notifications.send_admin_telegram') as send:
            confirm_payment(order_id=pending_order.id, user=user)

        send.assert_not_called()

    def test_approval_emails_license(self, admin_user, processing_order, mailoutbox, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            order = approve_order(order_id=processing_order.id, admin=admin_user, max_devices=3)

        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.to == ['customer@example.com']
        assert order.order_number in message.subject
        assert order.license.license_key in message.body

    def test_approval_for_telegram_delivery_sends_no_email(
        self, admin_user, processing_order, mailoutbox, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            approve_order(
                order_id=processing_order.id,
                admin=admin_user,
                delivery_method=DeliveryMethod.TELEGRAM,
                delivery_contact='@customer',
            )

        assert mailoutbox == []

    def test_email_failure_keeps_order_completed(
        self, admin_user, processing_order, django_capture_on_commit_callbacks
    ):
        with patch('apps.orders.notifications.send_mail', side_effect=SMTPException('relay down')):
            with django_capture_on_commit_callbacks(execute=True):
                approve_order(order_id=processing_order.id, admin=admin_user)

        processing_order.refresh_from_db()
        assert processing_order.status == OrderStatus.COMPLETED

    @override_settings(**TELEGRAM)
    def test_rejection_alerts_admins(self, admin_user, processing_order, django_capture_on_commit_callbacks):
        with patch('apps.orders.notifications.requests.post') as post:
            with django_capture_on_commit_callbacks(execute=True):
                reject_order(order_id=processing_order.id, admin=admin_user, reason='Sai số tiền')

        assert 'Sai số tiền' in post.call_args.kwargs['data']['text']
