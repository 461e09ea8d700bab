"""Marketplace administration endpoints: users, seller verification, dashboard."""

import logging
from decimal import Decimal

from django.db.models import Q, Sum
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from finance.models import Payout, Transaction
from orders.models import Order
from products.models import Product
from products.views import StandardResultsSetPagination

from .models import SellerProfile, User
from .permissions import IsAdmin
from .serializers import AdminUserSerializer, PendingSellerSerializer, UserStatusSerializer

logger = logging.getLogger(__name__)


class AdminUserViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    """User management for marketplace admins.

    Filters: ``user_type``, ``is_active`` (true/false) and ``search``
    (username, email, names).
    """

    permission_classes = [IsAdmin]
    lookup_value_regex = r'\d+'
    serializer_class = AdminUserSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        qs = User.objects.select_related('seller_profile').order_by('-date_joined')
        params = self.request.query_params

        user_type = params.get('user_type')
        if user_type:
            qs = qs.filter(user_type=user_type)

        is_active = params.get('is_active')
        if is_active is not None and is_active != '':
            qs = qs.filter(is_active=is_active.lower() in ('1', 'true', 'yes'))

        search = params.get('search')
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        return qs

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response({'detail': 'You cannot delete your own account.'}, status=status.HTTP_400_BAD_REQUEST)
        logger.info('Admin %s deleted user %s', request.user.pk, user.pk)
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['put', 'patch'])
    def status(self, request, pk=None):
        """Activate or deactivate an account."""
        user = self.get_object()
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data['is_active']

        if user.pk == request.user.pk and not is_active:
            return Response({'detail': 'You cannot deactivate your own account.'}, status=status.HTTP_400_BAD_REQUEST)

        user.is_active = is_active
        user.save(update_fields=['is_active'])
        return Response(AdminUserSerializer(user).data)


class SellerVerificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Sellers waiting for verification; ``approve`` marks one as verified."""

    permission_classes = [IsAdmin]
    lookup_value_regex = r'\d+'
    serializer_class = PendingSellerSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        return SellerProfile.objects.filter(is_verified=False).select_related('user').order_by('created_at')

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        profile = self.get_object()
        profile.is_verified = True
        profile.verified_at = timezone.now()
        profile.save(update_fields=['is_verified', 'verified_at', 'updated_at'])
        return Response({'detail': 'Seller verified.', 'seller': PendingSellerSerializer(profile).data})


@api_view(['GET'])
@permission_classes([IsAdmin])
def admin_dashboard(request):
    """Headline numbers for the marketplace admin."""
    zero = Decimal('0.00')
    settled = Transaction.objects.filter(status='success', wallet_credited=True).aggregate(
        revenue=Sum('amount'),
        admin_fees=Sum('admin_fee'),
    )
    order_counts = {
        value: Order.objects.filter(status=value).count()
        for value, _ in Order.STATUS_CHOICES
    }
    return Response({
        'users': {
            'total': User.objects.count(),
            'buyers': User.objects.filter(user_type='buyer').count(),
            'sellers': User.objects.filter(user_type='seller').count(),
            'inactive': User.objects.filter(is_active=False).count(),
            'pending_verifications': SellerProfile.objects.filter(is_verified=False).count(),
        },
        'orders': {
            'total': Order.objects.count(),
            'by_status': order_counts,
        },
        'products': {
            'total': Product.objects.count(),
            'active': Product.objects.filter(status='active').count(),
        },
        'revenue': {
            'gross': settled['revenue'] or zero,
            'admin_fees': settled['admin_fees'] or zero,
        },
        'pending_payouts': Payout.objects.filter(status='pending').count(),
    })
