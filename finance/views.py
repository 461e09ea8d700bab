"""Payment API views: initialize, verify and the gateway webhook."""

import json
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsBuyer
from orders.models import Order
from .exceptions import PaymentGatewayError, SettlementError
from .gateway import PaystackClient, get_gateway
from .models import Transaction
from .serializers import InitializePaymentSerializer
from . import services

logger = logging.getLogger(__name__)


def _gateway_error_response(message, error):
    body = {'detail': message}
    if settings.DEBUG:
        body['error'] = str(error)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
@permission_classes([IsBuyer])
def initialize_payment(request):
    """Start a hosted checkout for one of the buyer's unpaid orders."""
    payload = InitializePaymentSerializer(data=request.data)
    payload.is_valid(raise_exception=True)

    order = Order.objects.filter(pk=payload.validated_data['order_id'], buyer=request.user).first()
    if order is None:
        return Response({'detail': 'Order not found.'}, status=status.HTTP_404_NOT_FOUND)

    try:
        tx, gateway_data = services.initialize_payment(order, request.user, payload.validated_data.get('email'))
    except SettlementError as e:
        return Response({'detail': str(e)}, status=e.status_code)
    except PaymentGatewayError as e:
        logger.error('Payment initialization failed for order %s: %s', order.order_number, e)
        return _gateway_error_response('Payment initialization failed.', e)

    return Response({
        'authorization_url': gateway_data.get('authorization_url'),
        'access_code': gateway_data.get('access_code'),
        'reference': tx.reference,
        'amount': tx.amount,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def verify_payment(request):
    """Pull the charge status from the gateway and settle it (idempotent)."""
    reference = (request.query_params.get('reference') or '').strip()
    if not reference:
        return Response({'detail': 'reference is required.'}, status=status.HTTP_400_BAD_REQUEST)

    tx = Transaction.objects.filter(reference=reference).select_related('order').first()
    user = request.user
    is_admin = getattr(user, 'user_type', None) == 'admin' or user.is_superuser
    if tx is None or (tx.buyer_id != user.id and not is_admin):
        return Response({'detail': 'Transaction not found.'}, status=status.HTTP_404_NOT_FOUND)

    if tx.status == 'pending':
        try:
            verification = get_gateway().verify_payment(reference)
        except PaymentGatewayError as e:
            logger.error('Payment verification failed for %s: %s', reference, e)
            return _gateway_error_response('Payment verification failed.', e)

        if verification.get('status') != 'success':
            if verification.get('status') == 'failed':
                services.mark_charge_failed(reference, verification)
            return Response(
                {'detail': 'Payment not successful.', 'gateway_status': verification.get('status')},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            tx, _ = services.settle_successful_charge(reference, verification)
        except SettlementError as e:
            return Response({'detail': str(e)}, status=e.status_code)

    if tx.status != 'success':
        return Response({'detail': 'Payment not successful.', 'status': tx.status}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'detail': 'Payment verified successfully.',
        'order_id': tx.order_id,
        'reference': tx.reference,
        'amount': tx.amount,
        'status': 'completed',
    })


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def paystack_webhook(request):
    """Receive ``charge.success`` and ``transfer.*`` events from Paystack."""
    raw_body = request.body
    if settings.PAYSTACK_VERIFY_WEBHOOK_SIGNATURE:
        signature = request.headers.get('X-Paystack-Signature')
        if not get_gateway().verify_webhook_signature(raw_body, signature):
            logger.warning('Webhook rejected: invalid signature.')
            return Response({'detail': 'Invalid signature.'}, status=status.HTTP_401_UNAUTHORIZED)

    try:
        event = json.loads(raw_body or b'{}')
    except ValueError:
        return Response({'detail': 'Malformed payload.'}, status=status.HTTP_400_BAD_REQUEST)

    if not isinstance(event, dict):
        return Response({'detail': 'Malformed payload.'}, status=status.HTTP_400_BAD_REQUEST)

    name = event.get('event')
    data = event.get('data') or {}
    if not isinstance(data, dict):
        return Response({'detail': 'Malformed payload.'}, status=status.HTTP_400_BAD_REQUEST)

    if name == 'charge.success':
        reference = data.get('reference')
        amount = data.get('amount')
        gateway_data = {
            'raw': data,
            'amount': PaystackClient.to_naira(amount) if amount is not None else None,
        }
        try:
            services.settle_successful_charge(reference, gateway_data)
        except SettlementError as e:
            logger.warning('charge.success for %s not applied: %s', reference, e)
    elif name in ('transfer.success', 'transfer.failed', 'transfer.reversed'):
        services.handle_transfer_event(name, data)
    else:
        logger.info('Webhook event %s ignored.', name)

    return Response({'received': True})
