from decimal import Decimal

from rest_framework import serializers

from .models import PaymentRecord, PaymentStatus
from .services.reconciliation import STATUS_BUCKETS


# =============================================================================
# Input Serializers
# =============================================================================

class PayablesQuerySerializer(serializers.Serializer):
    """
    Validate query parameters for the monthly payables list.

    Query Parameters:
        month (int): 1-12, default current month
        year (int): default current year
        search (str): Case-insensitive description filter
        status (str): all, paid, partially_paid, pending, overdue, cancelled
    """

    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=1900, max_value=9999)
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status = serializers.ChoiceField(
        choices=list(STATUS_BUCKETS),
        required=False,
        default='all'
    )


class RegisterPaymentSerializer(serializers.Serializer):
    """
    Validate a payment registration.

    Fields:
        payment_id (UUID): Existing payment to update
        cost_definition_id (UUID): Cost to pay when no payment exists yet
        due_date (date): Due date of the obligation (optional)
        amount_paid (decimal): Amount paid, zero or more
    """

    payment_id = serializers.UUIDField(required=False)
    cost_definition_id = serializers.UUIDField(required=False)
    due_date = serializers.DateField(required=False)
    amount_paid = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00')
    )

    def validate(self, attrs):
        if not attrs.get('payment_id') and not attrs.get('cost_definition_id'):
            raise serializers.ValidationError(
                'Provide payment_id or cost_definition_id.'
            )
        return attrs


class PaymentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for payment history.

    Query Parameters:
        date_from (date): Due on or after this day
        date_to (date): Due on or before this day
        status (str): Stored payment status
    """

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class PayableItemSerializer(serializers.Serializer):
    """One reconciled obligation."""

    id = serializers.CharField()
    is_virtual = serializers.BooleanField()
    cost_definition_id = serializers.UUIDField(allow_null=True)
    description = serializers.CharField()
    category = serializers.CharField()
    due_date = serializers.DateField()
    amount_original = serializers.DecimalField(max_digits=12, decimal_places=2)
    amount_paid = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    payment_date = serializers.DateTimeField(allow_null=True)
    status = serializers.CharField()
    fine_amount = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    interest_amount = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)


class PayablesSummarySerializer(serializers.Serializer):
    count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    outstanding = serializers.DecimalField(max_digits=14, decimal_places=2)
    by_status = serializers.DictField(child=serializers.IntegerField())


class PayablesResponseSerializer(serializers.Serializer):
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    items = PayableItemSerializer(many=True)
    summary = PayablesSummarySerializer()


class DueAlertSerializer(serializers.Serializer):
    kind = serializers.CharField()
    item = PayableItemSerializer()


class PaymentRecordSerializer(serializers.ModelSerializer):
    """Stored payment row."""

    class Meta:
        model = PaymentRecord
        fields = [
            'id',
            'cost_definition',
            'description',
            'due_date',
            'amount_original',
            'amount_paid',
            'payment_date',
            'status',
            'fine_amount',
            'interest_amount',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
