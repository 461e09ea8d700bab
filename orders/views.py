"""Buyer-facing order API views.

Includes checkout, order history, cancellation, receipt confirmation and
the buyer dashboard.
"""

import logging
from collections import OrderedDict
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import IsBuyer
from cart.models import ShoppingCart
from finance.exceptions import SettlementError
from finance.services import release_order_funds
from products.models import Product
from products.serializers import ProductSerializer
from products.views import StandardResultsSetPagination
from .models import Order
from .serializers import CheckoutSerializer, OrderCancelSerializer, OrderSerializer

logger = logging.getLogger(__name__)


ACTIVE_ORDER_STATUSES = ('pending', 'confirmed', 'processing', 'shipped')


def filter_orders(queryset, params):
    """Apply the shared ``status``/``q``/``date_from``/``date_to`` list filters."""
    status_value = params.get('status')
    if status_value:
        queryset = queryset.filter(status=status_value)

    q = (params.get('q') or '').strip()
    if q:
        queryset = queryset.filter(order_number__icontains=q)

    date_from = parse_date(params.get('date_from') or '')
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)

    date_to = parse_date(params.get('date_to') or '')
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    return queryset


def restore_order_stock(order):
    """Put the quantities of a cancelled order back on the shelf (caller holds a transaction)."""
    lines = [line for line in order.lines.all() if line.product_id]
    products = Product.objects.select_for_update().in_bulk([line.product_id for line in lines])
    for line in lines:
        product = products.get(line.product_id)
        if product is not None:
            product.restore_stock(line.quantity)


class BuyerOrderViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.CreateModelMixin,
                        viewsets.GenericViewSet):
    """Buyer order endpoints.

    Checkout creates one order per seller; buyers can cancel unpaid orders
    before they are processed and confirm receipt once shipped.
    """

    permission_classes = [IsBuyer]
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        qs = (
            Order.objects.filter(buyer=self.request.user)
            .select_related('buyer', 'seller', 'seller__seller_profile')
            .prefetch_related('lines')
        )
        if self.action == 'list':
            qs = filter_orders(qs, self.request.query_params)
        return qs

    def create(self, request, *args, **kwargs):
        """Checkout from explicit ``items`` or from the buyer's cart.

        Locks the products, validates availability and stock, snapshots
        prices, decrements stock and clears the cart, all in one transaction.
        """
        payload = CheckoutSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        user = request.user

        with transaction.atomic():
            cart = None
            requested = OrderedDict()
            if data.get('items'):
                for item in data['items']:
                    pid = item['product'].pk
                    requested[pid] = requested.get(pid, 0) + item['quantity']
            else:
                cart = ShoppingCart.objects.select_for_update().filter(user=user).first()
                cart_items = list(cart.items.all()) if cart else []
                if not cart_items:
                    return Response({'detail': 'Cart is empty.'}, status=status.HTTP_400_BAD_REQUEST)
                for ci in cart_items:
                    requested[ci.product_id] = requested.get(ci.product_id, 0) + ci.qty

            # Lock all products involved.
            products = Product.objects.select_for_update().in_bulk(list(requested))

            by_seller = OrderedDict()
            for product_id, qty in requested.items():
                product = products.get(product_id)
                if product is None:
                    return Response({'detail': 'One or more items are invalid.'}, status=status.HTTP_400_BAD_REQUEST)
                if product.status != 'active':
                    return Response({'detail': f'{product.name} is not available.'}, status=status.HTTP_400_BAD_REQUEST)
                if qty > product.stock:
                    return Response(
                        {'detail': f'Insufficient stock for {product.name}. Available: {product.stock}.'},
                        status=status.HTTP_400_BAD_REQUEST,
                    )
                by_seller.setdefault(product.seller_id, []).append((product, qty))

            address = data['shipping_address']
            orders = []
            for seller_id, entries in by_seller.items():
                total = sum((product.price * qty for product, qty in entries), Decimal('0.00'))
                order = Order.objects.create(
                    buyer=user,
                    seller_id=seller_id,
                    total_amount=total,
                    payment_method=data['payment_method'],
                    shipping_name=address['name'],
                    shipping_address=address['address'],
                    shipping_city=address['city'],
                    shipping_state=address['state'],
                    shipping_zip_code=address.get('zip_code', ''),
                    shipping_country=address.get('country', 'Nigeria'),
                    shipping_phone=address['phone'],
                    buyer_notes=data.get('notes', ''),
                )
                for product, qty in entries:
                    order.lines.create(product=product, product_name=product.name, quantity=qty, price=product.price)
                    product.decrement_stock(qty)
                orders.append(order)

            if cart is not None:
                cart.items.all().delete()

        logger.info('Buyer %s checked out %d order(s).', user.id, len(orders))
        serializer = self.get_serializer(self.get_queryset().filter(pk__in=[o.pk for o in orders]), many=True)
        return Response({'orders': serializer.data}, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='cancel')
    def cancel(self, request, pk=None):
        """Cancel an unpaid order that has not started processing; restores stock."""
        payload = OrderCancelSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        with transaction.atomic():
            order = self.get_queryset().select_for_update(of=('self',)).filter(pk=pk).first()
            if order is None:
                return Response({'detail': 'Order not found.'}, status=status.HTTP_404_NOT_FOUND)
            if order.status not in ('pending', 'confirmed'):
                return Response({'detail': f'Order cannot be cancelled in status {order.status}.'}, status=status.HTTP_400_BAD_REQUEST)
            if order.is_paid:
                return Response({'detail': 'Paid orders cannot be cancelled; contact support for a refund.'}, status=status.HTTP_400_BAD_REQUEST)

            restore_order_stock(order)
            order.status = 'cancelled'
            order.cancelled_at = timezone.now()
            order.cancellation_reason = payload.validated_data.get('reason') or 'Cancelled by buyer'
            order.save(update_fields=['status', 'cancelled_at', 'cancellation_reason', 'updated_at'])

        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=['post'], url_path='confirm-receipt')
    def confirm_receipt(self, request, pk=None):
        """Buyer confirms the goods arrived; releases escrowed funds to the seller."""
        try:
            with transaction.atomic():
                order = self.get_queryset().select_for_update(of=('self',)).filter(pk=pk).first()
                if order is None:
                    return Response({'detail': 'Order not found.'}, status=status.HTTP_404_NOT_FOUND)
                if order.status not in ('shipped', 'delivered'):
                    return Response({'detail': 'Only shipped orders can be confirmed as received.'}, status=status.HTTP_400_BAD_REQUEST)
                if order.status == 'shipped':
                    order.status = 'delivered'
                    order.delivered_at = timezone.now()
                    order.save(update_fields=['status', 'delivered_at', 'updated_at'])

                released = False
                if order.is_paid and not order.funds_released:
                    release_order_funds(order.pk)
                    released = True
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)

        order.refresh_from_db()
        return Response({'order': self.get_serializer(order).data, 'funds_released': released})


@api_view(['GET'])
@permission_classes([IsBuyer])
def buyer_dashboard(request):
    """Order counters, spend, recent orders and product suggestions for a buyer."""
    user = request.user
    orders = Order.objects.filter(buyer=user)

    total_spent = orders.filter(payment_status='completed').aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')
    recent = orders.select_related('seller').prefetch_related('lines')[:5]

    bought = orders.values_list('lines__product_id', flat=True)
    recommended = (
        Product.objects.filter(status='active', stock__gt=0)
        .exclude(pk__in=[pid for pid in bought if pid])
        .select_related('category', 'seller')
        .order_by('-featured', '-sales_count', '-created_at')[:6]
    )

    return Response({
        'total_orders': orders.count(),
        'pending_orders': orders.filter(status__in=ACTIVE_ORDER_STATUSES).count(),
        'completed_orders': orders.filter(status='delivered').count(),
        'cancelled_orders': orders.filter(status='cancelled').count(),
        'total_spent': total_spent,
        'recent_orders': OrderSerializer(recent, many=True).data,
        'recommended_products': ProductSerializer(recommended, many=True, context={'request': request}).data,
    })
