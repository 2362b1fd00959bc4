"""Typed wrappers around the catalog, order and admin endpoints."""

from .models import (
    Package,
    Order,
    OrderPage,
    PaymentInfo,
    PaymentMethod,
    DeliveryMethod,
)


class PackagesApi:

    def __init__(self, client):
        self.client = client

    def list(self):
        return [Package.from_api(item) for item in self.client.get('packages', skip_auth=True)]

    def get(self, package_id):
        return Package.from_api(self.client.get(f'packages/{package_id}', skip_auth=True))


class OrdersApi:
    """Customer order endpoints."""

    def __init__(self, client):
        self.client = client

    def create(self, package_id, payment_method=PaymentMethod.VND_BANK_TRANSFER):
        """Returns ``(order, payment_info)``."""
        data = self.client.post('orders', {
            'packageId': str(package_id),
            'paymentMethod': PaymentMethod(payment_method).value,
        })
        return Order.from_api(data['order']), PaymentInfo.from_api(data['payment'])

    def get(self, order_id):
        return Order.from_api(self.client.get(f'orders/{order_id}'))

    def status(self, order_id):
        return self.client.get(f'orders/{order_id}/status')['status']

    def payment(self, order_id):
        return PaymentInfo.from_api(self.client.get(f'orders/{order_id}/payment'))

    def confirm(self, order_id):
        return Order.from_api(self.client.post(f'orders/{order_id}/confirm'))

    def mine(self, page=1, limit=20):
        return OrderPage.from_api(self.client.get('users/orders', params={'page': page, 'limit': limit}))


class AdminApi:
    """Admin console endpoints."""

    def __init__(self, client):
        self.client = client

    def list_orders(self, status=None, search=None, page=1, limit=20):
        params = {'page': page, 'limit': limit}
        if status:
            params['status'] = getattr(status, 'value', status)
        if search:
            params['search'] = search
        return OrderPage.from_api(self.client.get('admin/orders', params=params))

    def get_order(self, order_id):
        return Order.from_api(self.client.get(f'admin/orders/{order_id}'))

    def approve(self, order_id, *, max_devices=None, delivery_method=DeliveryMethod.EMAIL,
                delivery_contact='', admin_notes=''):
        payload = {
            'deliveryMethod': DeliveryMethod(delivery_method).value,
            'deliveryContact': delivery_contact,
            'adminNotes': admin_notes,
        }
        if max_devices is not None:
            payload['maxDevices'] = max_devices
        return Order.from_api(self.client.put(f'admin/orders/{order_id}/approve', payload))

    def reject(self, order_id, reason):
        return Order.from_api(self.client.put(f'admin/orders/{order_id}/reject', {'reason': reason}))

    def dashboard(self):
        return self.client.get('admin/dashboard')
