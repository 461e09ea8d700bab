"""Buyer/seller messaging.

- ``conversations``: list the caller's threads; buyers start (or reopen) one
- ``conversations/{id}/messages``: list or send messages
- ``conversations/{id}/read``: mark the other party's messages read
- ``sellers``: sellers a buyer can contact
"""

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.views import StandardResultsSetPagination
from .models import Conversation, Message
from .serializers import (
    ConversationSerializer,
    MessageSerializer,
    SellerContactSerializer,
    StartConversationSerializer,
)

User = get_user_model()


class ConversationViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'
    serializer_class = ConversationSerializer
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        # Non-participants get 404 because the thread is not in their queryset.
        user = self.request.user
        return (
            Conversation.objects
            .filter(Q(buyer=user) | Q(seller=user))
            .select_related('buyer', 'seller', 'seller__seller_profile')
        )

    def create(self, request, *args, **kwargs):
        """Start a conversation with a seller, or append to the existing one."""
        if request.user.user_type != 'buyer':
            return Response({'detail': 'Only buyers can start conversations.'}, status=status.HTTP_403_FORBIDDEN)

        payload = StartConversationSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        seller = payload.validated_data['seller']

        with transaction.atomic():
            conversation, created = Conversation.objects.get_or_create(buyer=request.user, seller=seller)
            message = Message.objects.create(
                conversation=conversation,
                sender=request.user,
                text=payload.validated_data['message'],
            )
            conversation.record_message(message)

        return Response(
            {
                'conversation': self.get_serializer(conversation).data,
                'message': MessageSerializer(message).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @action(detail=True, methods=['get', 'post'])
    def messages(self, request, pk=None):
        conversation = self.get_object()

        if request.method == 'GET':
            qs = conversation.messages.select_related('sender')
            page = self.paginate_queryset(qs)
            if page is not None:
                return self.get_paginated_response(MessageSerializer(page, many=True).data)
            return Response(MessageSerializer(qs, many=True).data)

        serializer = MessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            message = serializer.save(conversation=conversation, sender=request.user)
            conversation.record_message(message)
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['put'])
    def read(self, request, pk=None):
        conversation = self.get_object()
        updated = conversation.mark_read(request.user)
        return Response({'marked_read': updated, 'unread_count': 0})

    @action(detail=False, methods=['get'])
    def sellers(self, request):
        qs = (
            User.objects.filter(user_type='seller', is_active=True)
            .select_related('seller_profile')
            .order_by('username')
        )
        search = request.query_params.get('search')
        if search:
            qs = qs.filter(Q(username__icontains=search) | Q(seller_profile__business_name__icontains=search))
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(SellerContactSerializer(page, many=True).data)
        return Response(SellerContactSerializer(qs, many=True).data)
