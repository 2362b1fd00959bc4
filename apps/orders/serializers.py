from django.conf import settings
from rest_framework import serializers

from apps.core.pagination import PageQuerySerializer
from .models import Order, OrderStatus, PaymentMethod, DeliveryMethod


class OrderPackageSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    durationMonths = serializers.IntegerField(source='duration_months')


class AdminOrderPackageSerializer(OrderPackageSerializer):
    salePrice = serializers.IntegerField(source='sale_price')


class OrderLicenseSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    licenseKey = serializers.CharField(source='license_key')
    maxDevices = serializers.IntegerField(source='max_devices')
    startDate = serializers.DateTimeField(source='start_date')
    endDate = serializers.DateTimeField(source='end_date')
    status = serializers.CharField()


class OrderCustomerSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()


class OrderSerializer(serializers.ModelSerializer):
    """Order as seen by its owner."""

    orderNumber = serializers.CharField(source='order_number', read_only=True)
    userId = serializers.UUIDField(source='user_id', read_only=True)
    packageId = serializers.UUIDField(source='package_id', read_only=True)
    packageName = serializers.CharField(source='package_name', read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    transferContent = serializers.CharField(source='transfer_content', read_only=True)
    statusLabel = serializers.CharField(source='status_label', read_only=True)
    userConfirmedAt = serializers.DateTimeField(source='user_confirmed_at', read_only=True)
    approvedAt = serializers.DateTimeField(source='approved_at', read_only=True)
    rejectedAt = serializers.DateTimeField(source='rejected_at', read_only=True)
    rejectionReason = serializers.CharField(source='rejection_reason', read_only=True)
    licenseId = serializers.UUIDField(source='license_id', read_only=True)
    deliveryMethod = serializers.CharField(source='delivery_method', read_only=True)
    deliveryContact = serializers.CharField(source='delivery_contact', read_only=True)
    deliveredAt = serializers.DateTimeField(source='delivered_at', read_only=True)
    expiresAt = serializers.DateTimeField(source='expires_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    package = OrderPackageSerializer(read_only=True)
    license = OrderLicenseSerializer(read_only=True, allow_null=True)
    downloadLink = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id',
            'orderNumber',
            'userId',
            'packageId',
            'packageName',
            'amount',
            'currency',
            'paymentMethod',
            'transferContent',
            'status',
            'statusLabel',
            'userConfirmedAt',
            'approvedAt',
            'rejectedAt',
            'rejectionReason',
            'licenseId',
            'deliveryMethod',
            'deliveryContact',
            'deliveredAt',
            'expiresAt',
            'createdAt',
            'updatedAt',
            'package',
            'license',
            'downloadLink',
        ]
        read_only_fields = ['id', 'amount', 'currency', 'status']

    def get_downloadLink(self, obj):
        if obj.status == OrderStatus.COMPLETED and settings.LICENSE_DOWNLOAD_URL:
            return settings.LICENSE_DOWNLOAD_URL
        return None


class AdminOrderSerializer(OrderSerializer):
    """Order as seen in the admin console."""

    user = OrderCustomerSerializer(read_only=True)
    package = AdminOrderPackageSerializer(read_only=True)
    adminNotes = serializers.CharField(source='admin_notes', read_only=True)
    approvedBy = serializers.SerializerMethodField()
    rejectedBy = serializers.SerializerMethodField()
    needsAdminAction = serializers.BooleanField(source='needs_admin_action', read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + [
            'user',
            'adminNotes',
            'approvedBy',
            'rejectedBy',
            'needsAdminAction',
        ]

    def get_approvedBy(self, obj):
        return obj.approved_by.email if obj.approved_by_id else None

    def get_rejectedBy(self, obj):
        return obj.rejected_by.email if obj.rejected_by_id else None


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class CreateOrderSerializer(serializers.Serializer):
    """Checkout request."""

    packageId = serializers.UUIDField()
    paymentMethod = serializers.CharField(
        required=False,
        default=PaymentMethod.VND_BANK_TRANSFER,
        max_length=20
    )


class ApproveOrderSerializer(serializers.Serializer):
    maxDevices = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    deliveryMethod = serializers.ChoiceField(
        choices=DeliveryMethod.choices,
        required=False,
        default=DeliveryMethod.EMAIL
    )
    deliveryContact = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    adminNotes = serializers.CharField(required=False, allow_blank=True, default='')


class RejectOrderSerializer(serializers.Serializer):
    # Emptiness is checked by the rejection service itself
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class OrderListQuerySerializer(PageQuerySerializer):
    """Admin list filters."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    search = serializers.CharField(required=False, allow_blank=True)


class OrderListResponseSerializer(serializers.Serializer):
    """Documentation shape of paginated order lists."""

    orders = AdminOrderSerializer(many=True)
    pagination = serializers.DictField()


class PaymentInfoSerializer(serializers.Serializer):
    """Documentation shape of the payment block."""

    qrCode = serializers.CharField()
    qrPayload = serializers.CharField()
    bankInfo = serializers.DictField()
    amount = serializers.IntegerField()
    currency = serializers.CharField()
    transferContent = serializers.CharField()
    vietQRUrl = serializers.URLField()
    expiresAt = serializers.DateTimeField()


class CreateOrderResponseSerializer(serializers.Serializer):
    order = OrderSerializer()
    payment = PaymentInfoSerializer()
