from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for shop accounts.

    Every account is a tenant; the list shows how much each shop has
    recorded so support staff can spot empty or busy accounts.
    """

    list_display = [
        'email',
        'business_name',
        'cost_count',
        'payment_count',
        'is_active',
        'created_at',
    ]

    list_filter = ['is_active', 'is_staff']
    search_fields = ['email', 'display_name', 'business_name']
    ordering = ['-created_at']

    fieldsets = (
        ('Shop', {
            'fields': ('email', 'display_name', 'business_name', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create Shop', {
            'classes': ('wide',),
            'fields': ('email', 'business_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = []

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(
            _cost_count=Count('cost_definitions', distinct=True),
            _payment_count=Count('payments', distinct=True),
        )

    def cost_count(self, obj):
        return obj._cost_count
    cost_count.short_description = 'Costs'
    cost_count.admin_order_field = '_cost_count'

    def payment_count(self, obj):
        return obj._payment_count
    payment_count.short_description = 'Payments'
    payment_count.admin_order_field = '_payment_count'
