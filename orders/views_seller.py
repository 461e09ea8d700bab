"""Seller-facing order API views: fulfilment, delivery confirmation and dashboard."""

import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import IsSeller
from finance.exceptions import SettlementError
from finance.models import Transaction, Wallet
from finance.serializers import WalletSerializer
from finance.services import release_order_funds
from products.models import Product
from products.views import StandardResultsSetPagination
from .models import Order
from .serializers import OrderSerializer, OrderStatusUpdateSerializer
from .views import filter_orders, restore_order_stock

logger = logging.getLogger(__name__)


ESTIMATED_DELIVERY_DAYS = 5

_ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    'pending': {'confirmed', 'cancelled'},
    'confirmed': {'processing', 'cancelled'},
    'processing': {'shipped', 'cancelled'},
    'shipped': {'delivered'},
    'delivered': set(),
    'cancelled': set(),
    'refunded': set(),
}


def transition_allowed(current: str, target: str) -> bool:
    return target in _ALLOWED_TRANSITIONS.get(current, set())


class SellerOrderViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """Orders placed with the authenticated seller.

    Supports optional filters: ``status``, ``q`` (order number), ``date_from``, ``date_to``.
    """

    permission_classes = [IsSeller]
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        qs = (
            Order.objects.filter(seller=self.request.user)
            .select_related('buyer', 'seller', 'seller__seller_profile')
            .prefetch_related('lines')
        )
        if self.action == 'list':
            qs = filter_orders(qs, self.request.query_params)
        return qs

    @action(detail=True, methods=['patch'], url_path='set-status')
    def set_status(self, request, pk=None):
        """Move an order along its fulfilment lifecycle.

        Payload: ``{status, carrier?, tracking_number?, reason?}``.
        """
        payload = OrderStatusUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        new_status = data['status']

        with transaction.atomic():
            order = self.get_queryset().select_for_update(of=('self',)).filter(pk=pk).first()
            if order is None:
                return Response({'detail': 'Order not found.'}, status=status.HTTP_404_NOT_FOUND)

            if not transition_allowed(order.status, new_status):
                return Response(
                    {'detail': f'Invalid status transition from {order.status} to {new_status}.'},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            now = timezone.now()
            update_fields = ['status', 'updated_at']

            if new_status == 'cancelled':
                if order.is_paid:
                    return Response({'detail': 'Paid orders cannot be cancelled; contact support for a refund.'}, status=status.HTTP_400_BAD_REQUEST)
                restore_order_stock(order)
                order.cancelled_at = now
                order.cancellation_reason = data.get('reason') or 'Cancelled by seller'
                update_fields += ['cancelled_at', 'cancellation_reason']

            if new_status == 'shipped':
                order.shipped_at = now
                order.estimated_delivery = now + timedelta(days=ESTIMATED_DELIVERY_DAYS)
                update_fields += ['shipped_at', 'estimated_delivery']

            if new_status == 'delivered':
                order.delivered_at = now
                update_fields.append('delivered_at')

            # Optional fulfillment tracking updates
            if 'carrier' in data:
                order.carrier = data['carrier'].strip() or None
                update_fields.append('carrier')
            if 'tracking_number' in data:
                order.tracking_number = data['tracking_number'].strip() or None
                update_fields.append('tracking_number')

            order.status = new_status
            order.save(update_fields=update_fields)

        logger.info('Seller %s moved order %s to %s.', request.user.id, order.order_number, new_status)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=['post'], url_path='confirm-delivery')
    def confirm_delivery(self, request, pk=None):
        """Release the escrowed seller share of a delivered order to the wallet balance."""
        if not self.get_queryset().filter(pk=pk).exists():
            return Response({'detail': 'Order not found.'}, status=status.HTTP_404_NOT_FOUND)

        try:
            order, tx, wallet = release_order_funds(pk)
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)

        return Response({
            'detail': 'Funds released to wallet.',
            'order_id': order.pk,
            'amount': tx.seller_amount,
            'new_balance': wallet.balance,
        })


@api_view(['GET'])
@permission_classes([IsSeller])
def seller_dashboard(request):
    """Catalog, order and earnings summary for a seller."""
    user = request.user
    orders = Order.objects.filter(seller=user)
    products = Product.objects.filter(seller=user)
    wallet, _ = Wallet.objects.get_or_create(seller=user)

    revenue = (
        Transaction.objects.filter(seller=user, status='success', wallet_credited=True)
        .aggregate(total=Sum('amount'), net=Sum('seller_amount'))
    )
    recent = orders.select_related('buyer', 'seller').prefetch_related('lines')[:5]

    return Response({
        'total_products': products.count(),
        'active_products': products.filter(status='active').count(),
        'low_stock_products': products.filter(stock__gt=0, stock__lte=10).count(),
        'out_of_stock_products': products.filter(status='out_of_stock').count(),
        'total_orders': orders.count(),
        'pending_orders': orders.filter(status__in=('pending', 'confirmed')).count(),
        'processing_orders': orders.filter(status='processing').count(),
        'delivered_orders': orders.filter(status='delivered').count(),
        'gross_sales': revenue['total'] or Decimal('0.00'),
        'net_earnings': revenue['net'] or Decimal('0.00'),
        'wallet': WalletSerializer(wallet).data,
        'recent_orders': OrderSerializer(recent, many=True).data,
    })
