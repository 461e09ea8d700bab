from django.contrib import admin
from .models import Conversation, Message


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    readonly_fields = ('sender', 'text', 'read', 'read_at', 'created_at')


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ('id', 'buyer', 'seller', 'last_message_at', 'buyer_unread_count', 'seller_unread_count')
    search_fields = ('buyer__username', 'seller__username')
    inlines = [MessageInline]
