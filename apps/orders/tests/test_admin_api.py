from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.licenses.models import License
from apps.orders.models import Order, OrderStatus
from apps.orders.services import create_order, confirm_payment, approve_order, reject_order


@pytest.mark.django_db
class TestAdminAccess:

    @pytest.mark.parametrize('name', [
        'admin-orders:order-list',
        'admin-orders:dashboard',
    ])
    def test_customer_is_forbidden(self, authenticated_client, name):
        response = authenticated_client.get(reverse(name))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['message'] == 'Admin access required.'

    def test_anonymous_is_unauthorized(self, api_client, db):
        response = api_client.get(reverse('admin-orders:order-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_customer_cannot_approve(self, authenticated_client, processing_order):
        url = reverse('admin-orders:order-approve', kwargs={'pk': processing_order.id})
        response = authenticated_client.put(url, {}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        processing_order.refresh_from_db()
        assert processing_order.status == OrderStatus.PROCESSING


@pytest.mark.django_db
class TestAdminOrderList:
    """Tests for GET /api/admin/orders/"""

    def test_lists_all_orders(self, admin_client, user, other_user, package):
        create_order(user=user, package_id=package.id)
        create_order(user=other_user, package_id=package.id)

        response = admin_client.get(reverse('admin-orders:order-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['pagination']['total'] == 2
        first = response.data['orders'][0]
        assert set(first['user']) == {'id', 'name', 'email', 'phone'}
        assert first['package']['salePrice'] == 1199000
        assert first['needsAdminAction'] is False

    def test_filter_by_status(self, admin_client, user, package, processing_order):
        create_order(user=user, package_id=package.id)

        response = admin_client.get(reverse('admin-orders:order-list'), {'status': 'PROCESSING'})

        assert [o['id'] for o in response.data['orders']] == [str(processing_order.id)]
        assert response.data['orders'][0]['needsAdminAction'] is True

    def test_unknown_status(self, admin_client):
        response = admin_client.get(reverse('admin-orders:order-list'), {'status': 'PAID'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'

    def test_search_by_memo_suffix(self, admin_client, user, package, pending_order):
        create_order(user=user, package_id=package.id)
        suffix = pending_order.transfer_content.split(' ')[-1].lower()

        response = admin_client.get(reverse('admin-orders:order-list'), {'search': suffix})

        assert str(pending_order.id) in [o['id'] for o in response.data['orders']]

    def test_search_by_customer_email(self, admin_client, other_user, package, pending_order):
        create_order(user=other_user, package_id=package.id)

        response = admin_client.get(reverse('admin-orders:order-list'), {'search': 'CUSTOMER@'})

        assert [o['id'] for o in response.data['orders']] == [str(pending_order.id)]

    def test_newest_first(self, admin_client, user, package):
        older = create_order(user=user, package_id=package.id)
        Order.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(hours=1))
        newer = create_order(user=user, package_id=package.id)

        response = admin_client.get(reverse('admin-orders:order-list'))

        assert [o['id'] for o in response.data['orders']] == [str(newer.id), str(older.id)]

    def test_pagination(self, admin_client, user, package):
        for _ in range(5):
            create_order(user=user, package_id=package.id)

        response = admin_client.get(reverse('admin-orders:order-list'), {'page': 3, 'limit': 2})

        assert len(response.data['orders']) == 1
        assert response.data['pagination'] == {'total': 5, 'page': 3, 'limit': 2, 'totalPages': 3}

    def test_detail(self, admin_client, processing_order):
        url = reverse('admin-orders:order-detail', kwargs={'pk': processing_order.id})
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['email'] == 'customer@example.com'
        assert response.data['approvedBy'] is None


@pytest.mark.django_db
class TestAdminApprove:
    """Tests for PUT /api/admin/orders/{id}/approve/"""

    def test_approve(self, admin_client, admin_user, processing_order):
        url = reverse('admin-orders:order-approve', kwargs={'pk': processing_order.id})
        response = admin_client.put(url, {
            'maxDevices': 3,
            'deliveryMethod': 'EMAIL',
            'adminNotes': 'Matched MB statement',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == OrderStatus.COMPLETED
        assert response.data['license']['maxDevices'] == 3
        assert response.data['deliveryContact'] == 'customer@example.com'
        assert response.data['approvedBy'] == admin_user.email
        assert response.data['adminNotes'] == 'Matched MB statement'
        assert License.objects.filter(user=processing_order.user).count() == 1

    def test_approve_twice_conflicts(self, admin_client, processing_order):
        url = reverse('admin-orders:order-approve', kwargs={'pk': processing_order.id})
        admin_client.put(url, {'maxDevices': 3}, format='json')
        response = admin_client.put(url, {'maxDevices': 3}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'INVALID_STATE'
        assert License.objects.count() == 1

    def test_approve_pending_conflicts(self, admin_client, pending_order):
        url = reverse('admin-orders:order-approve', kwargs={'pk': pending_order.id})
        response = admin_client.put(url, {}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_invalid_max_devices(self, admin_client, processing_order):
        url = reverse('admin-orders:order-approve', kwargs={'pk': processing_order.id})
        response = admin_client.put(url, {'maxDevices': 0}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'maxDevices' in response.data['details']

    def test_issuer_failure(self, admin_client, processing_order, settings):
        settings.LICENSE_ISSUER_CLASS = 'apps.orders.tests.test_admin_api.BrokenIssuer'
        url = reverse('admin-orders:order-approve', kwargs={'pk': processing_order.id})
        response = admin_client.put(url, {}, format='json')

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.data['code'] == 'LICENSE_ISSUANCE_FAILED'
        processing_order.refresh_from_db()
        assert processing_order.status == OrderStatus.PROCESSING

    def test_unknown_order(self, admin_client):
        url = reverse('admin-orders:order-approve', kwargs={'pk': '00000000-0000-0000-0000-000000000000'})
        response = admin_client.put(url, {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND


class BrokenIssuer:
    def issue(self, *, user, package, max_devices):
        raise RuntimeError('issuer offline')


@pytest.mark.django_db
class TestAdminReject:
    """Tests for PUT /api/admin/orders/{id}/reject/"""

    def test_reject(self, admin_client, admin_user, processing_order):
        url = reverse('admin-orders:order-reject', kwargs={'pk': processing_order.id})
        response = admin_client.put(url, {'reason': 'Không nhận được chuyển khoản'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == OrderStatus.REJECTED
        assert response.data['statusLabel'] == 'Đã hủy'
        assert response.data['rejectionReason'] == 'Không nhận được chuyển khoản'
        assert response.data['rejectedBy'] == admin_user.email

    def test_reject_requires_reason(self, admin_client, processing_order):
        url = reverse('admin-orders:order-reject', kwargs={'pk': processing_order.id})
        response = admin_client.put(url, {'reason': '   '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'
        processing_order.refresh_from_db()
        assert processing_order.status == OrderStatus.PROCESSING

    def test_reject_completed_conflicts(self, admin_client, admin_user, processing_order):
        approve_order(order_id=processing_order.id, admin=admin_user)
        url = reverse('admin-orders:order-reject', kwargs={'pk': processing_order.id})
        response = admin_client.put(url, {'reason': 'late'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.django_db
class TestDashboard:
    """Tests for GET /api/admin/dashboard/"""

    def test_counters(self, admin_client, admin_user, user, other_user, package):
        pending = create_order(user=user, package_id=package.id)
        approved = confirm_payment(
            order_id=create_order(user=user, package_id=package.id).id, user=user
        )
        approve_order(order_id=approved.id, admin=admin_user)
        rejected = confirm_payment(
            order_id=create_order(user=other_user, package_id=package.id).id, user=other_user
        )
        reject_order(order_id=rejected.id, admin=admin_user, reason='no transfer')

        response = admin_client.get(reverse('admin-orders:dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['totalUsers'] == 3
        assert response.data['totalOrders'] == 3
        assert response.data['pendingOrders'] == 1
        assert response.data['processingOrders'] == 0
        assert response.data['completedOrders'] == 1
        assert response.data['rejectedOrders'] == 1
        assert response.data['expiredOrders'] == 0
        assert response.data['totalLicenses'] == 1
        assert response.data['activeLicenses'] == 1
        assert response.data['monthlyRevenue'] == 1199000
        assert pending.status == OrderStatus.PENDING

    def test_revenue_excludes_previous_months(self, admin_user, processing_order):
        from apps.orders.services import get_dashboard_stats
        approve_order(order_id=processing_order.id, admin=admin_user)
        Order.objects.filter(pk=processing_order.pk).update(
            approved_at=timezone.now() - timedelta(days=40)
        )

        stats = get_dashboard_stats()

        assert stats['completedOrders'] == 1
        assert stats['monthlyRevenue'] == 0
