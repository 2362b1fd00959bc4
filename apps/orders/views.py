from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsAdminRole
from apps.core.pagination import PageQuerySerializer, build_pagination
from .models import OrderStatus
from .payments import build_payment_info
from .serializers import (
    OrderSerializer,
    AdminOrderSerializer,
    OrderStatusSerializer,
    CreateOrderSerializer,
    ApproveOrderSerializer,
    RejectOrderSerializer,
    OrderListQuerySerializer,
    OrderListResponseSerializer,
    PaymentInfoSerializer,
    CreateOrderResponseSerializer,
)
from .services import (
    create_order,
    confirm_payment,
    approve_order,
    reject_order,
    get_order,
    list_orders,
    get_dashboard_stats,
)


class OrderViewSet(viewsets.ViewSet):
    """
    Customer checkout.

    create: Start an order for a package and get payment instructions
    retrieve: Get one of your orders
    confirm: Report that the bank transfer was sent
    order_status: Poll the order status
    payment: Get the payment instructions again
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=CreateOrderSerializer,
        responses={201: CreateOrderResponseSerializer},
        tags=['orders'],
    )
    def create(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = create_order(
            user=request.user,
            package_id=serializer.validated_data['packageId'],
            payment_method=serializer.validated_data['paymentMethod'],
        )

        return Response({
            'order': OrderSerializer(order).data,
            'payment': build_payment_info(order),
        }, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: OrderSerializer}, tags=['orders'])
    def retrieve(self, request, pk=None):
        order = get_order(order_id=pk, user=request.user)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=None, responses={200: OrderSerializer}, tags=['orders'])
    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        """PENDING -> PROCESSING once the customer has sent the transfer."""
        order = confirm_payment(order_id=pk, user=request.user)
        return Response(OrderSerializer(get_order(order_id=order.pk)).data)

    @extend_schema(responses={200: OrderStatusSerializer}, tags=['orders'])
    @action(detail=True, methods=['get'], url_path='status', url_name='status')
    def order_status(self, request, pk=None):
        order = get_order(order_id=pk, user=request.user)
        return Response({'status': order.status})

    @extend_schema(responses={200: PaymentInfoSerializer}, tags=['orders'])
    @action(detail=True, methods=['get'])
    def payment(self, request, pk=None):
        order = get_order(order_id=pk, user=request.user)
        return Response(build_payment_info(order))


@extend_schema(
    parameters=[
        OpenApiParameter('page', int, description='1-based page number'),
        OpenApiParameter('limit', int, description='Page size (max 100)'),
    ],
    responses={200: OrderListResponseSerializer},
    description="List the current user's orders, newest first.",
    tags=['orders'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_orders(request):
    query = PageQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    page = query.validated_data['page']
    limit = query.validated_data['limit']

    orders, total = list_orders(owner_id=request.user.pk, page=page, limit=limit)

    return Response({
        'orders': OrderSerializer(orders, many=True).data,
        'pagination': build_pagination(total=total, page=page, limit=limit),
    })


class AdminOrderViewSet(viewsets.ViewSet):
    """
    Admin review console.

    list: Filter and search all orders
    retrieve: Full order details including customer
    approve: Issue the license and complete a PROCESSING order
    reject: Reject a PROCESSING order with a reason
    """

    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, enum=OrderStatus.values),
            OpenApiParameter('search', str, description='Transfer memo, order number, customer email or name'),
            OpenApiParameter('page', int),
            OpenApiParameter('limit', int),
        ],
        responses={200: OrderListResponseSerializer},
        tags=['admin'],
    )
    def list(self, request):
        query = OrderListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        orders, total = list_orders(
            status=params.get('status'),
            search_text=params.get('search'),
            page=params['page'],
            limit=params['limit'],
        )

        return Response({
            'orders': AdminOrderSerializer(orders, many=True).data,
            'pagination': build_pagination(total=total, page=params['page'], limit=params['limit']),
        })

    @extend_schema(responses={200: AdminOrderSerializer}, tags=['admin'])
    def retrieve(self, request, pk=None):
        return Response(AdminOrderSerializer(get_order(order_id=pk)).data)

    @extend_schema(request=ApproveOrderSerializer, responses={200: AdminOrderSerializer}, tags=['admin'])
    @action(detail=True, methods=['put'])
    def approve(self, request, pk=None):
        serializer = ApproveOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = approve_order(
            order_id=pk,
            admin=request.user,
            max_devices=data.get('maxDevices'),
            delivery_method=data['deliveryMethod'],
            delivery_contact=data['deliveryContact'],
            admin_notes=data['adminNotes'],
        )
        return Response(AdminOrderSerializer(get_order(order_id=order.pk)).data)

    @extend_schema(request=RejectOrderSerializer, responses={200: AdminOrderSerializer}, tags=['admin'])
    @action(detail=True, methods=['put'])
    def reject(self, request, pk=None):
        serializer = RejectOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = reject_order(
            order_id=pk,
            admin=request.user,
            reason=serializer.validated_data['reason'],
        )
        return Response(AdminOrderSerializer(get_order(order_id=order.pk)).data)


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description="Order, license and revenue counters for the admin dashboard.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def dashboard(request):
    return Response(get_dashboard_stats())
