"""
Client-side views of API payloads.

``OrderStatus`` is closed: every member has an entry in ``STATUS_DISPLAY``
and an unknown status from the server fails loudly instead of rendering as
an empty badge.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class OrderStatus(str, Enum):
    PENDING = 'PENDING'
    PROCESSING = 'PROCESSING'
    COMPLETED = 'COMPLETED'
    REJECTED = 'REJECTED'
    EXPIRED = 'EXPIRED'


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    tone: str
    needs_admin_action: bool
    is_terminal: bool


STATUS_DISPLAY = {
    OrderStatus.PENDING: StatusDisplay('Chờ thanh toán', 'yellow', False, False),
    OrderStatus.PROCESSING: StatusDisplay('Chờ xác nhận', 'blue', True, False),
    OrderStatus.COMPLETED: StatusDisplay('Hoàn thành', 'green', False, True),
    OrderStatus.REJECTED: StatusDisplay('Đã hủy', 'red', False, True),
    OrderStatus.EXPIRED: StatusDisplay('Hết hạn', 'gray', False, True),
}


class PaymentMethod(str, Enum):
    VND_BANK_TRANSFER = 'VND_BANK_TRANSFER'
    USDT = 'USDT'


# Listed at checkout; only bank transfer is accepted for now
PAYMENT_METHOD_AVAILABLE = {
    PaymentMethod.VND_BANK_TRANSFER: True,
    PaymentMethod.USDT: False,
}


class DeliveryMethod(str, Enum):
    EMAIL = 'EMAIL'
    TELEGRAM = 'TELEGRAM'
    ZALO = 'ZALO'


def _parse_datetime(value):
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def format_vnd(amount):
    """1199000 -> '1.199.000đ'"""
    return f"{amount:,}".replace(',', '.') + 'đ'


@dataclass
class Package:
    id: str
    name: str
    duration_months: int
    original_price: int
    sale_price: int
    discount_percent: int = 0
    is_popular: bool = False
    max_devices: int = 1
    features: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data['id'],
            name=data['name'],
            duration_months=data['durationMonths'],
            original_price=int(data['originalPrice']),
            sale_price=int(data['salePrice']),
            discount_percent=data.get('discountPercent', 0),
            is_popular=data.get('isPopular', False),
            max_devices=data.get('maxDevices', 1),
            features=list(data.get('features') or []),
        )


@dataclass
class BankInfo:
    bank_name: str
    bank_code: str
    account_number: str
    account_name: str

    @classmethod
    def from_api(cls, data):
        return cls(
            bank_name=data['bankName'],
            bank_code=data['bankCode'],
            account_number=data['accountNumber'],
            account_name=data['accountName'],
        )


@dataclass
class PaymentInfo:
    """What the customer needs to make the transfer."""

    bank_info: BankInfo
    amount: int
    transfer_content: str
    qr_code: str
    viet_qr_url: str
    expires_at: Optional[datetime]

    @classmethod
    def from_api(cls, data):
        return cls(
            bank_info=BankInfo.from_api(data['bankInfo']),
            amount=int(data['amount']),
            transfer_content=data['transferContent'],
            qr_code=data['qrCode'],
            viet_qr_url=data['vietQRUrl'],
            expires_at=_parse_datetime(data.get('expiresAt')),
        )


@dataclass
class Order:
    id: str
    order_number: str
    status: OrderStatus
    package_name: str
    amount: int
    transfer_content: str
    created_at: Optional[datetime]
    expires_at: Optional[datetime] = None
    user_email: str = ''
    license_key: Optional[str] = None
    download_link: Optional[str] = None
    rejection_reason: str = ''

    @classmethod
    def from_api(cls, data):
        user = data.get('user') or {}
        license = data.get('license') or {}
        return cls(
            id=data['id'],
            order_number=data['orderNumber'],
            status=OrderStatus(data['status']),
            package_name=data.get('packageName') or (data.get('package') or {}).get('name', ''),
            amount=int(data['amount']),
            transfer_content=data['transferContent'],
            created_at=_parse_datetime(data.get('createdAt')),
            expires_at=_parse_datetime(data.get('expiresAt')),
            user_email=user.get('email', ''),
            license_key=license.get('licenseKey'),
            download_link=data.get('downloadLink'),
            rejection_reason=data.get('rejectionReason') or '',
        )

    @property
    def display(self) -> StatusDisplay:
        return STATUS_DISPLAY[self.status]

    @property
    def needs_admin_action(self):
        return self.display.needs_admin_action


@dataclass
class Pagination:
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_api(cls, data):
        return cls(
            total=data['total'],
            page=data['page'],
            limit=data['limit'],
            total_pages=data['totalPages'],
        )


@dataclass
class OrderPage:
    orders: List[Order]
    pagination: Pagination

    @classmethod
    def from_api(cls, data):
        return cls(
            orders=[Order.from_api(item) for item in data['orders']],
            pagination=Pagination.from_api(data['pagination']),
        )
