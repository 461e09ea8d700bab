"""Seller wallet and payout endpoints."""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsSeller
from products.views import StandardResultsSetPagination
from .exceptions import SettlementError
from .models import Payout, Transaction, Wallet
from .serializers import (
    PayoutRequestSerializer,
    PayoutSerializer,
    TransactionSerializer,
    WalletSerializer,
)
from . import services


class SellerPayoutViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """Seller payouts.

    - ``wallet``: current balances
    - ``request``: withdraw from the available balance
    - ``history``: payouts, optionally filtered by ``status``
    - ``{id}/cancel``: withdraw a pending request
    """

    permission_classes = [IsSeller]
    lookup_value_regex = r'\d+'
    serializer_class = PayoutSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        qs = Payout.objects.filter(seller=self.request.user).select_related('seller')
        status_value = self.request.query_params.get('status')
        if status_value:
            qs = qs.filter(status=status_value)
        return qs

    @action(detail=False, methods=['get'])
    def wallet(self, request):
        wallet, _ = Wallet.objects.get_or_create(seller=request.user)
        return Response(WalletSerializer(wallet).data)

    @action(detail=False, methods=['get'])
    def history(self, request):
        return self.list(request)

    @action(detail=False, methods=['get'])
    def transactions(self, request):
        """Payments received by the seller, newest first."""
        qs = Transaction.objects.filter(seller=request.user).select_related('order')
        status_value = request.query_params.get('status')
        if status_value:
            qs = qs.filter(status=status_value)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(TransactionSerializer(page, many=True).data)
        return Response(TransactionSerializer(qs, many=True).data)

    @action(detail=False, methods=['post'], url_path='request')
    def request_payout(self, request):
        payload = PayoutRequestSerializer(data=request.data)
        if not payload.is_valid():
            if 'amount' in payload.errors or 'detail' in payload.errors:
                return Response({'detail': 'Valid amount required.'}, status=status.HTTP_400_BAD_REQUEST)
            return Response(payload.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            payout = services.request_payout(
                request.user,
                payload.validated_data['amount'],
                payload.validated_data['payout_method'],
            )
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)

        wallet = Wallet.objects.get(seller=request.user)
        return Response(
            {'payout': PayoutSerializer(payout).data, 'wallet': WalletSerializer(wallet).data},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        try:
            payout = services.cancel_payout(pk, seller=request.user)
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)
        return Response(PayoutSerializer(payout).data)
