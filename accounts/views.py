"""Accounts app views.

Contains:
- Registration (JWT login/refresh come from simplejwt, see urls.py)
- Profile read/update, section updates and password change
"""

import logging

from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from finance.exceptions import PaymentGatewayError
from finance.gateway import get_gateway

from .models import BuyerProfile, SellerProfile
from .serializers import (
    BUYER_PROFILE_SECTIONS,
    SELLER_PROFILE_SECTIONS,
    ChangePasswordSerializer,
    ProfileSectionUpdateSerializer,
    RegisterSerializer,
    UserProfileSerializer,
)

logger = logging.getLogger(__name__)


# 1. كلاس التسجيل
class RegisterView(generics.CreateAPIView):
    """Public registration endpoint for buyers and sellers."""
    queryset = RegisterSerializer.Meta.model.objects.all()
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = RegisterSerializer


# 2. كلاس إدارة البروفايل
class UserProfileViewSet(viewsets.GenericViewSet):
    """Authenticated profile management.

    - ``me``: read or update the account fields.
    - ``section``: update one profile section (``{"section": ..., "data": {...}}``).
    - ``change-password``.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = UserProfileSerializer

    @action(detail=False, methods=['get', 'put'])
    def me(self, request):
        """Get or update the authenticated user's profile."""
        user = request.user
        if request.method == 'GET':
            return Response(self.get_serializer(user).data)

        serializer = self.get_serializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        user.refresh_from_db()
        return Response(self.get_serializer(user).data)

    def _section_target(self, user, target):
        if target == 'user':
            return user
        if target == 'seller_profile':
            profile, _ = SellerProfile.objects.get_or_create(user=user)
            return profile
        profile, _ = BuyerProfile.objects.get_or_create(user=user)
        return profile

    @action(detail=False, methods=['patch'], url_path='section')
    def section(self, request):
        """Update a single profile section with that section's own validation."""
        user = request.user
        if user.user_type not in ('buyer', 'seller'):
            return Response({'detail': 'Profile sections are only available to buyers and sellers.'}, status=status.HTTP_403_FORBIDDEN)

        envelope = ProfileSectionUpdateSerializer(data=request.data, context={'request': request})
        envelope.is_valid(raise_exception=True)
        section = envelope.validated_data['section']

        sections = SELLER_PROFILE_SECTIONS if user.user_type == 'seller' else BUYER_PROFILE_SECTIONS
        serializer_class, target = sections[section]
        instance = self._section_target(user, target)

        serializer = serializer_class(instance, data=envelope.validated_data['data'], partial=True, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.save()

        if section == 'payment':
            self._register_transfer_recipient(instance)

        return Response({'section': section, 'data': serializer_class(instance).data})

    def _register_transfer_recipient(self, profile):
        """Register bank details with the gateway so payouts can be sent.

        A failure here is not fatal: the recipient is created again when
        the first payout is processed.
        """
        if profile.payout_method != 'bank' or profile.recipient_code:
            return
        if not (profile.account_number and profile.bank_code):
            return
        try:
            recipient = get_gateway().create_transfer_recipient(
                account_number=profile.account_number,
                bank_code=profile.bank_code,
                name=profile.account_name or profile.business_name or profile.user.get_full_name(),
            )
        except PaymentGatewayError as e:
            logger.warning('Could not register transfer recipient for seller %s: %s', profile.user_id, e)
            return
        profile.recipient_code = recipient.get('recipient_code')
        profile.save(update_fields=['recipient_code'])

    @action(detail=False, methods=['post'], url_path='change-password')
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data['new_password'])
        request.user.save(update_fields=['password'])
        return Response({'detail': 'Password updated.'})
