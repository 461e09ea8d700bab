"""Serializers for the accounts app.

Includes:
- Registration with strong validation
- Profile read model (user + buyer/seller profile)
- One serializer per editable profile section
- Password change and admin user management
"""

import re
import phonenumbers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import BuyerProfile, SellerProfile


User = get_user_model()


def normalize_phone(phone, field_name):
    """Validate an international phone number and return it in E.164 form."""
    if not phone:
        raise serializers.ValidationError({field_name: 'Phone number is required.'})

    # "+234 803-123" -> "+234803123"
    phone_input = str(phone).strip()
    clean_phone = re.sub(r'(?<!^)\+|[^\d+]', '', phone_input)

    if clean_phone.startswith('00'):
        clean_phone = '+' + clean_phone[2:]
    if not clean_phone.startswith('+'):
        clean_phone = '+' + clean_phone

    try:
        parsed_phone = phonenumbers.parse(clean_phone, None)
        if not phonenumbers.is_valid_number(parsed_phone):
            raise ValueError
    except (phonenumbers.NumberParseException, ValueError):
        raise serializers.ValidationError({
            field_name: f'Phone number {phone_input} is not valid. Include the country code (e.g. +234).'
        })

    return phonenumbers.format_number(parsed_phone, phonenumbers.PhoneNumberFormat.E164)


# 1. محول التسجيل
class RegisterSerializer(serializers.ModelSerializer):
    """Create a new buyer or seller with strong validation.

    Also creates the corresponding profile model based on ``user_type``.
    Admin accounts are never self-registered.
    """

    password = serializers.CharField(write_only=True)
    user_type = serializers.ChoiceField(choices=[('buyer', 'Buyer'), ('seller', 'Seller')])
    phone_number = serializers.CharField(required=False, allow_blank=True)

    business_name = serializers.CharField(required=False, allow_blank=True)
    business_type = serializers.ChoiceField(choices=SellerProfile.BUSINESS_TYPE_CHOICES, required=False)
    business_address = serializers.CharField(required=False, allow_blank=True)
    business_phone = serializers.CharField(required=False, allow_blank=True)
    tax_number = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = User
        fields = (
            'id', 'username', 'password', 'email', 'first_name', 'last_name', 'user_type', 'phone_number',
            'business_name', 'business_type', 'business_address', 'business_phone', 'tax_number',
        )
        read_only_fields = ('id',)

    def validate_username(self, value):
        if not re.match(r'^[a-zA-Z0-9._]+$', value):
            raise serializers.ValidationError('Username may only contain letters, digits, dots and underscores.')
        if len(value) < 4:
            raise serializers.ValidationError('Username must be at least 4 characters long.')
        return value

    def validate_email(self, value):
        email_regex = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_regex, value or ''):
            raise serializers.ValidationError('Enter a valid email address.')
        value = value.lower().strip()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate(self, attrs):
        user_type = attrs.get('user_type')

        attrs['phone_number'] = normalize_phone(attrs.get('phone_number'), 'phone_number')

        if user_type == 'seller':
            for field in ('business_name', 'business_address'):
                if not (attrs.get(field) or '').strip():
                    raise serializers.ValidationError({field: 'This field is required for sellers.'})
            if not attrs.get('business_type'):
                raise serializers.ValidationError({'business_type': 'This field is required for sellers.'})
            if attrs.get('business_phone'):
                attrs['business_phone'] = normalize_phone(attrs['business_phone'], 'business_phone')
        else:
            for field in ('business_name', 'business_type', 'business_address', 'business_phone', 'tax_number'):
                attrs.pop(field, None)

        return attrs

    def create(self, validated_data):
        seller_fields = {
            key: validated_data.pop(key)
            for key in ('business_name', 'business_type', 'business_address', 'business_phone', 'tax_number')
            if key in validated_data
        }
        user = User.objects.create_user(**validated_data)

        if user.user_type == 'seller':
            SellerProfile.objects.create(user=user, **seller_fields)
        else:
            BuyerProfile.objects.create(user=user, phone_number=user.phone_number)
        return user


# 2. البروفايلات
class BuyerProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = BuyerProfile
        fields = ('phone_number', 'shipping_address', 'notification_preferences')


class SellerProfileSerializer(serializers.ModelSerializer):
    """Seller profile as shown to the seller themself (bank details included)."""

    class Meta:
        model = SellerProfile
        fields = (
            'business_name', 'business_type', 'business_address', 'business_phone', 'business_description',
            'tax_number', 'registration_number', 'is_verified', 'verified_at',
            'payout_method', 'bank_name', 'account_number', 'account_name', 'bank_code',
            'communication_preferences', 'operational_settings',
        )
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """Aggregated profile view: account fields plus the role-specific profile."""

    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'first_name', 'last_name', 'phone_number', 'user_type', 'date_joined', 'profile')
        read_only_fields = ('username', 'user_type', 'date_joined')

    def validate_phone_number(self, value):
        if not value:
            return value
        return normalize_phone(value, 'phone_number')

    def get_profile(self, obj):
        if obj.user_type == 'seller':
            profile = SellerProfile.objects.filter(user=obj).first()
            return SellerProfileSerializer(profile).data if profile else None
        if obj.user_type == 'buyer':
            profile = BuyerProfile.objects.filter(user=obj).first()
            return BuyerProfileSerializer(profile).data if profile else None
        return None


# 3. أقسام تعديل البروفايل (section -> serializer)
class PersonalInfoSerializer(serializers.ModelSerializer):
    """Account-level personal details, shared by buyers and sellers."""

    class Meta:
        model = User
        fields = ('first_name', 'last_name', 'email', 'phone_number')

    def validate_email(self, value):
        value = value.lower().strip()
        if User.objects.filter(email__iexact=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return value

    def validate_phone_number(self, value):
        if not value:
            return value
        return normalize_phone(value, 'phone_number')


class BuyerPersonalInfoSerializer(PersonalInfoSerializer):
    shipping_address = serializers.CharField(required=False, allow_blank=True)

    class Meta(PersonalInfoSerializer.Meta):
        fields = PersonalInfoSerializer.Meta.fields + ('shipping_address',)

    def update(self, instance, validated_data):
        shipping_address = validated_data.pop('shipping_address', None)
        user = super().update(instance, validated_data)
        profile, _ = BuyerProfile.objects.get_or_create(user=user)
        if shipping_address is not None:
            profile.shipping_address = shipping_address
        if 'phone_number' in validated_data:
            profile.phone_number = validated_data['phone_number']
        profile.save()
        return user


class BusinessInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = SellerProfile
        fields = (
            'business_name', 'business_type', 'business_address', 'business_phone',
            'business_description', 'tax_number', 'registration_number',
        )

    def validate_business_name(self, value):
        if not (value or '').strip():
            raise serializers.ValidationError('Business name cannot be empty.')
        return value.strip()

    def validate_business_phone(self, value):
        if not value:
            return value
        return normalize_phone(value, 'business_phone')


class PaymentInfoSerializer(serializers.ModelSerializer):
    """Payout destination; bank payouts need a bank name and account number."""

    class Meta:
        model = SellerProfile
        fields = ('payout_method', 'bank_name', 'account_number', 'account_name', 'bank_code')

    def validate_account_number(self, value):
        if value and not re.match(r'^\d{10}$', value):
            raise serializers.ValidationError('Account number must be 10 digits.')
        return value

    def validate(self, attrs):
        method = attrs.get('payout_method', getattr(self.instance, 'payout_method', 'bank'))
        if method == 'bank':
            bank_name = attrs.get('bank_name', getattr(self.instance, 'bank_name', None))
            account_number = attrs.get('account_number', getattr(self.instance, 'account_number', None))
            if not bank_name or not account_number:
                raise serializers.ValidationError('Bank name and account number are required for bank payouts.')
        if 'account_number' in attrs or 'bank_code' in attrs:
            # Changed bank details invalidate any recipient registered with the gateway.
            attrs['recipient_code'] = None
        return attrs


class _PreferencesSerializer(serializers.Serializer):
    """Merge validated keys into a JSON preferences field on a profile."""

    json_field = None

    def update(self, instance, validated_data):
        current = dict(getattr(instance, self.json_field) or {})
        current.update(validated_data)
        setattr(instance, self.json_field, current)
        instance.save(update_fields=[self.json_field])
        return instance

    def to_representation(self, instance):
        if isinstance(instance, dict):
            return instance
        return dict(getattr(instance, self.json_field) or {})


class CommunicationPrefsSerializer(_PreferencesSerializer):
    json_field = 'communication_preferences'

    email = serializers.BooleanField(required=False)
    sms = serializers.BooleanField(required=False)
    order_updates = serializers.BooleanField(required=False)
    marketing = serializers.BooleanField(required=False)


class OperationalSettingsSerializer(_PreferencesSerializer):
    json_field = 'operational_settings'

    processing_time_days = serializers.IntegerField(required=False, min_value=0, max_value=60)
    return_policy = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    shipping_regions = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    auto_accept_orders = serializers.BooleanField(required=False)


class NotificationPrefsSerializer(_PreferencesSerializer):
    json_field = 'notification_preferences'

    email = serializers.BooleanField(required=False)
    push = serializers.BooleanField(required=False)
    sms = serializers.BooleanField(required=False)


# section name -> (serializer, which object it edits)
SELLER_PROFILE_SECTIONS = {
    'personal': (PersonalInfoSerializer, 'user'),
    'business': (BusinessInfoSerializer, 'seller_profile'),
    'payment': (PaymentInfoSerializer, 'seller_profile'),
    'communication': (CommunicationPrefsSerializer, 'seller_profile'),
    'operational': (OperationalSettingsSerializer, 'seller_profile'),
}

BUYER_PROFILE_SECTIONS = {
    'personal': (BuyerPersonalInfoSerializer, 'user'),
    'notifications': (NotificationPrefsSerializer, 'buyer_profile'),
}


class ProfileSectionUpdateSerializer(serializers.Serializer):
    section = serializers.CharField()
    data = serializers.DictField()

    def validate_section(self, value):
        user = self.context['request'].user
        sections = SELLER_PROFILE_SECTIONS if user.user_type == 'seller' else BUYER_PROFILE_SECTIONS
        if value not in sections:
            raise serializers.ValidationError(
                f"Unknown profile section '{value}'. Expected one of: {', '.join(sorted(sections))}."
            )
        return value


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect.')
        return value

    def validate_new_password(self, value):
        validate_password(value, self.context['request'].user)
        return value


# 4. لوحة الإدارة
class AdminUserSerializer(serializers.ModelSerializer):
    business_name = serializers.SerializerMethodField()
    is_verified = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'first_name', 'last_name', 'phone_number', 'user_type',
            'is_active', 'date_joined', 'last_login', 'business_name', 'is_verified',
        )
        read_only_fields = fields

    def _seller_profile(self, obj):
        try:
            return obj.seller_profile
        except SellerProfile.DoesNotExist:
            return None

    def get_business_name(self, obj):
        profile = self._seller_profile(obj)
        return profile.business_name if profile else None

    def get_is_verified(self, obj):
        profile = self._seller_profile(obj)
        return profile.is_verified if profile else None


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class PendingSellerSerializer(serializers.ModelSerializer):
    username = serializers.ReadOnlyField(source='user.username')
    email = serializers.ReadOnlyField(source='user.email')
    user_id = serializers.ReadOnlyField(source='user.id')

    class Meta:
        model = SellerProfile
        fields = (
            'id', 'user_id', 'username', 'email', 'business_name', 'business_type',
            'business_address', 'tax_number', 'registration_number', 'created_at',
        )
