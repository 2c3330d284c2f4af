from django.contrib import admin
from django.utils.html import format_html

from .models import PaymentRecord, PaymentStatus
from .services import register_payment


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    """
    Admin interface for registered payments.

    Description and original amount are snapshots taken when the payment
    was registered and are read-only here.
    """

    list_display = [
        'description',
        'owner',
        'due_date',
        'amount_original',
        'amount_paid',
        'status_badge',
        'payment_date',
    ]

    list_filter = [
        'status',
        'due_date',
        'payment_date',
    ]

    search_fields = [
        'description',
        'owner__email',
        'owner__business_name',
    ]

    readonly_fields = [
        'cost_definition',
        'description',
        'amount_original',
        'created_at',
        'updated_at',
    ]

    date_hierarchy = 'due_date'
    ordering = ['-due_date', '-created_at']

    fieldsets = (
        ('Obligation', {
            'fields': ('owner', 'cost_definition', 'description', 'due_date', 'amount_original')
        }),
        ('Payment', {
            'fields': ('status', 'amount_paid', 'payment_date')
        }),
        ('Charges', {
            'fields': ('fine_amount', 'interest_amount'),
            'classes': ('collapse',),
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['mark_fully_paid']

    def status_badge(self, obj):
        """Display payment status as colored badge."""
        colors = {
            PaymentStatus.PENDING: ('#E5C49A', '#2C1810'),
            PaymentStatus.PAID: ('#6B8E5E', 'white'),
            PaymentStatus.OVERDUE: ('#B85C5C', 'white'),
            PaymentStatus.CANCELLED: ('#999', 'white'),
            PaymentStatus.PARTIALLY_PAID: ('#D9A441', '#2C1810'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Mark as fully paid')
    def mark_fully_paid(self, request, queryset):
        """Pay the original amount of every selected payment."""
        count = 0
        for payment in queryset.exclude(status=PaymentStatus.PAID):
            register_payment(
                owner=payment.owner,
                amount_paid=payment.amount_original,
                payment_id=payment.id,
            )
            count += 1
        self.message_user(request, f'Marked {count} payment(s) as paid.')

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('owner', 'cost_definition')
