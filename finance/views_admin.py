"""Admin payout processing and platform earnings."""

import logging
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Sum
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import IsAdmin
from products.views import StandardResultsSetPagination
from .exceptions import PaymentGatewayError, SettlementError
from .models import Payout, Transaction, Wallet
from .serializers import PayoutDecisionSerializer, PayoutSerializer
from . import services

logger = logging.getLogger(__name__)


class AdminPayoutViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """All payout requests; admins process or reject pending ones."""

    permission_classes = [IsAdmin]
    lookup_value_regex = r'\d+'
    serializer_class = PayoutSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        qs = Payout.objects.select_related('seller')
        status_value = self.request.query_params.get('status')
        if status_value:
            qs = qs.filter(status=status_value)
        return qs

    @action(detail=True, methods=['post'])
    def process(self, request, pk=None):
        try:
            payout = services.process_payout(pk, request.user)
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)
        except PaymentGatewayError as e:
            logger.error('Payout %s transfer failed: %s', pk, e)
            body = {'detail': 'Transfer failed; payout marked failed and balance restored.'}
            if settings.DEBUG:
                body['error'] = str(e)
            return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(PayoutSerializer(payout).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        payload = PayoutDecisionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            payout = services.cancel_payout(pk, admin=request.user, notes=payload.validated_data['notes'])
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)
        return Response(PayoutSerializer(payout).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def platform_earnings(request):
    """Commission collected by the marketplace, plus money held for sellers."""
    settled = Transaction.objects.filter(status='success', wallet_credited=True)
    totals = settled.aggregate(
        gross=Sum('amount'),
        admin_fees=Sum('admin_fee'),
        seller_share=Sum('seller_amount'),
        count=Count('id'),
    )
    held = Wallet.objects.aggregate(
        pending=Sum('pending_balance'),
        available=Sum('balance'),
        locked=Sum('locked_balance'),
        withdrawn=Sum('total_withdrawn'),
    )
    zero = Decimal('0.00')
    return Response({
        'total_admin_fees': totals['admin_fees'] or zero,
        'gross_volume': totals['gross'] or zero,
        'seller_share': totals['seller_share'] or zero,
        'successful_transactions': totals['count'],
        'escrow_pending': held['pending'] or zero,
        'seller_available': held['available'] or zero,
        'payouts_in_flight': held['locked'] or zero,
        'total_paid_out': held['withdrawn'] or zero,
        'pending_payout_requests': Payout.objects.filter(status='pending').count(),
    })
