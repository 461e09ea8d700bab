"""Database models for buyer/seller conversations."""

from django.db import models
from django.conf import settings
from django.utils import timezone


class Conversation(models.Model):
    """One thread per (buyer, seller) pair, with a snapshot of the last message."""

    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='buyer_conversations')
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='seller_conversations')

    last_message = models.TextField(blank=True, default='')
    last_message_sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+',
    )
    last_message_at = models.DateTimeField(null=True, blank=True)

    buyer_unread_count = models.PositiveIntegerField(default=0)
    seller_unread_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-last_message_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['buyer', 'seller'], name='unique_buyer_seller_conversation'),
        ]

    def __str__(self):
        return f"{self.buyer.username} <-> {self.seller.username}"

    def has_participant(self, user):
        return user.pk in (self.buyer_id, self.seller_id)

    def other_party(self, user):
        return self.seller if user.pk == self.buyer_id else self.buyer

    def unread_for(self, user):
        return self.buyer_unread_count if user.pk == self.buyer_id else self.seller_unread_count

    def record_message(self, message):
        """Update the snapshot and bump the recipient's unread counter."""
        self.last_message = message.text
        self.last_message_sender = message.sender
        self.last_message_at = message.created_at
        if message.sender_id == self.buyer_id:
            self.seller_unread_count = models.F('seller_unread_count') + 1
        else:
            self.buyer_unread_count = models.F('buyer_unread_count') + 1
        self.save(update_fields=[
            'last_message', 'last_message_sender', 'last_message_at',
            'buyer_unread_count', 'seller_unread_count', 'updated_at',
        ])
        self.refresh_from_db(fields=['buyer_unread_count', 'seller_unread_count'])

    def mark_read(self, user):
        """Mark the other party's messages read and reset ``user``'s counter.

        Returns the number of messages updated.
        """
        updated = self.messages.filter(read=False).exclude(sender=user).update(read=True, read_at=timezone.now())
        if user.pk == self.buyer_id:
            self.buyer_unread_count = 0
            self.save(update_fields=['buyer_unread_count', 'updated_at'])
        else:
            self.seller_unread_count = 0
            self.save(update_fields=['seller_unread_count', 'updated_at'])
        return updated


class Message(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_messages')
    text = models.TextField()
    read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Message {self.id} from {self.sender.username}"
