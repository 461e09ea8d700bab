from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Conversation, Message

User = get_user_model()


class MessageSerializer(serializers.ModelSerializer):
    sender_username = serializers.ReadOnlyField(source='sender.username')

    class Meta:
        model = Message
        fields = ('id', 'sender', 'sender_username', 'text', 'read', 'read_at', 'created_at')
        read_only_fields = ('id', 'sender', 'read', 'read_at', 'created_at')

    def validate_text(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Message text cannot be empty.")
        return value


class ConversationSerializer(serializers.ModelSerializer):
    buyer_username = serializers.ReadOnlyField(source='buyer.username')
    seller_username = serializers.ReadOnlyField(source='seller.username')
    business_name = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = (
            'id', 'buyer', 'buyer_username', 'seller', 'seller_username', 'business_name',
            'last_message', 'last_message_sender', 'last_message_at', 'unread_count', 'created_at',
        )
        read_only_fields = fields

    def get_business_name(self, obj):
        profile = getattr(obj.seller, 'seller_profile', None)
        return profile.business_name if profile else None

    def get_unread_count(self, obj):
        request = self.context.get('request')
        if request is None:
            return None
        return obj.unread_for(request.user)


class StartConversationSerializer(serializers.Serializer):
    seller = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(user_type='seller', is_active=True))
    message = serializers.CharField(max_length=5000)

    def validate_message(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Message text cannot be empty.")
        return value


class SellerContactSerializer(serializers.ModelSerializer):
    business_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ('id', 'username', 'first_name', 'last_name', 'business_name')

    def get_business_name(self, obj):
        profile = getattr(obj, 'seller_profile', None)
        return profile.business_name if profile else None
