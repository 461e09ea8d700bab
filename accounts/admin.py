from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User, BuyerProfile, SellerProfile

# 1. منع تكرار التسجيل
if admin.site.is_registered(User):
    admin.site.unregister(User)

# 2. البروفايلات داخل صفحة المستخدم
class BuyerProfileInline(admin.StackedInline):
    model = BuyerProfile
    can_delete = False
    verbose_name_plural = 'Buyer Profile Info'

class SellerProfileInline(admin.StackedInline):
    model = SellerProfile
    can_delete = False
    verbose_name_plural = 'Seller Profile Info'
    readonly_fields = ('recipient_code', 'verified_at', 'created_at', 'updated_at')

# 3. تخصيص لوحة تحكم المستخدم
class MarketplaceUserAdmin(UserAdmin):
    model = User
    list_display = ['username', 'email', 'user_type', 'is_active', 'phone_number']
    list_filter = UserAdmin.list_filter + ('user_type',)

    fieldsets = UserAdmin.fieldsets + (
        ('Role & Contact', {'fields': ('user_type', 'phone_number')}),
    )

    # إظهار البروفايل المناسب حسب نوع المستخدم
    def get_inline_instances(self, request, obj=None):
        if not obj:
            return []
        if obj.user_type == 'seller':
            return [SellerProfileInline(self.model, self.admin_site)]
        if obj.user_type == 'buyer':
            return [BuyerProfileInline(self.model, self.admin_site)]
        return []


@admin.register(SellerProfile)
class SellerProfileAdmin(admin.ModelAdmin):
    list_display = ('business_name', 'user', 'business_type', 'is_verified', 'payout_method', 'created_at')
    list_filter = ('is_verified', 'business_type', 'payout_method')
    search_fields = ('business_name', 'user__username', 'user__email')
    actions = ['mark_verified']

    @admin.action(description='Mark selected sellers as verified')
    def mark_verified(self, request, queryset):
        from django.utils import timezone
        updated = queryset.filter(is_verified=False).update(is_verified=True, verified_at=timezone.now())
        self.message_user(request, f'{updated} seller(s) verified.')


admin.site.register(User, MarketplaceUserAdmin)
