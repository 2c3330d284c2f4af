from django.contrib import admin
from django.utils.html import format_html

from .models import CostDefinition, CostType, OperatingHoursSchedule, PricingProfile


@admin.register(CostDefinition)
class CostDefinitionAdmin(admin.ModelAdmin):
    """
    Admin interface for operational costs.

    Recurring series show one row per occurrence; filter by
    ``recurrence_group_id`` to see a whole series.
    """

    list_display = [
        'description',
        'owner',
        'value',
        'type_badge',
        'expense_date',
        'is_recurring',
        'get_category',
    ]

    list_filter = [
        'type',
        'is_recurring',
        'recurrence_frequency',
        'expense_date',
    ]

    search_fields = [
        'description',
        'category',
        'owner__email',
        'owner__business_name',
    ]

    readonly_fields = ['recurrence_group_id', 'created_at', 'updated_at']
    date_hierarchy = 'expense_date'
    ordering = ['-expense_date', '-created_at']

    fieldsets = (
        ('Cost', {
            'fields': ('owner', 'description', 'value', 'type', 'expense_date', 'category')
        }),
        ('Recurrence', {
            'fields': (
                'is_recurring',
                'recurrence_frequency',
                'recurrence_end_date',
                'recurrence_group_id',
            )
        }),
        ('Notes', {
            'fields': ('observation',),
            'classes': ('collapse',),
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def type_badge(self, obj):
        """Display cost type as colored badge."""
        colors = {
            CostType.FIXED: ('#3B6EA8', 'white'),
            CostType.VARIABLE: ('#D9A441', '#2C1810'),
        }
        bg, fg = colors.get(obj.type, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_type_display()
        )
    type_badge.short_description = 'Type'
    type_badge.admin_order_field = 'type'

    def get_category(self, obj):
        return obj.effective_category
    get_category.short_description = 'Category'
    get_category.admin_order_field = 'category'


@admin.register(OperatingHoursSchedule)
class OperatingHoursScheduleAdmin(admin.ModelAdmin):
    list_display = ['owner', 'allows_overnight', 'updated_at']
    search_fields = ['owner__email']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(PricingProfile)
class PricingProfileAdmin(admin.ModelAdmin):
    list_display = [
        'owner',
        'initial_investment',
        'include_investment',
        'working_capital_goal',
        'include_working_capital',
    ]
    search_fields = ['owner__email']
