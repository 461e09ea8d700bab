"""Serializers for the helpdesk contact form."""

from rest_framework import serializers


class ContactSupportSerializer(serializers.Serializer):
    CATEGORY_CHOICES = (
        ('general', 'General'),
        ('orders', 'Orders'),
        ('payments', 'Payments'),
        ('account', 'Account'),
        ('technical', 'Technical'),
    )

    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    subject = serializers.CharField(max_length=200)
    message = serializers.CharField(max_length=5000)
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES, default='general')

    def validate_message(self, value):
        if len(value.strip()) < 10:
            raise serializers.ValidationError('Please describe the problem in at least 10 characters.')
        return value.strip()
