from decimal import Decimal

from rest_framework import serializers

from .models import (
    CostDefinition,
    CostType,
    OperatingHoursSchedule,
    PricingProfile,
    RecurrenceFrequency,
)
from .services.hourly_cost import STRATEGIES
from .services.periods import format_minutes
from .services.operating_hours import SCHEDULE_FIELDS
from .services.periods import parse_hhmm


# =============================================================================
# Input Serializers
# =============================================================================

class CostDefinitionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for cost listing.

    Query Parameters:
        date_from (date): Costs dated on or after this day
        date_to (date): Costs dated on or before this day
        type (str): fixed or variable
        search (str): Substring of description or category
    """

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    type = serializers.ChoiceField(choices=CostType.choices, required=False)
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


class CostDefinitionInputSerializer(serializers.Serializer):
    """Validate input for creating or editing a cost."""

    description = serializers.CharField(max_length=255)
    value = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00')
    )
    type = serializers.ChoiceField(choices=CostType.choices, default=CostType.FIXED)
    expense_date = serializers.DateField(required=False, allow_null=True)
    is_recurring = serializers.BooleanField(default=False)
    recurrence_frequency = serializers.ChoiceField(
        choices=RecurrenceFrequency.choices,
        required=False,
        allow_null=True
    )
    recurrence_end_date = serializers.DateField(required=False, allow_null=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    observation = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        """Check recurrence fields together (full writes only)."""
        if self.partial:
            return attrs

        if attrs.get('is_recurring'):
            if not attrs.get('recurrence_frequency'):
                raise serializers.ValidationError({
                    'recurrence_frequency': 'Required for recurring costs.'
                })
            if not attrs.get('expense_date'):
                raise serializers.ValidationError({
                    'expense_date': 'Recurring costs need a start date.'
                })
            end = attrs.get('recurrence_end_date')
            if end and end < attrs['expense_date']:
                raise serializers.ValidationError({
                    'recurrence_end_date': 'Must not be before the start date.'
                })
        elif attrs.get('recurrence_frequency'):
            raise serializers.ValidationError({
                'recurrence_frequency': 'Only recurring costs can have a frequency.'
            })

        return attrs


class CostDeleteQuerySerializer(serializers.Serializer):
    delete_series = serializers.BooleanField(required=False, default=False)


class OperatingHoursInputSerializer(serializers.Serializer):
    """
    Validate a schedule update.

    Every ``<weekday>_start`` / ``<weekday>_end`` field is optional; blank
    clears the time.
    """

    allows_overnight = serializers.BooleanField(required=False)

    def get_fields(self):
        fields = super().get_fields()
        for name in SCHEDULE_FIELDS:
            fields[name] = serializers.CharField(
                required=False,
                allow_blank=True,
                max_length=5
            )
        return fields

    def validate(self, attrs):
        errors = {}
        for name in SCHEDULE_FIELDS:
            text = attrs.get(name)
            if text and parse_hhmm(text) is None:
                errors[name] = 'Use HH:MM (00:00 to 23:59).'
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class HourlyCostQuerySerializer(serializers.Serializer):
    """
    Validate hourly-cost query parameters.

    Query Parameters:
        month (int): 1-12, default current month
        year (int): default current year
        strategy (str): weekly_average or daily_average
    """

    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=1900, max_value=9999)
    strategy = serializers.ChoiceField(choices=sorted(STRATEGIES), required=False)


class CostAnalysisQuerySerializer(serializers.Serializer):
    """
    Validate cost analysis query parameters.

    Without dates the current month is analysed.
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if bool(start_date) != bool(end_date):
            raise serializers.ValidationError(
                'Provide both start_date and end_date, or neither.'
            )
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class CostDefinitionSerializer(serializers.ModelSerializer):
    """Cost definition as returned by the API."""

    effective_category = serializers.CharField(read_only=True)

    class Meta:
        model = CostDefinition
        fields = [
            'id',
            'description',
            'value',
            'type',
            'expense_date',
            'is_recurring',
            'recurrence_frequency',
            'recurrence_end_date',
            'recurrence_group_id',
            'category',
            'effective_category',
            'observation',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class OperatingHoursSerializer(serializers.ModelSerializer):
    class Meta:
        model = OperatingHoursSchedule
        fields = ['id', *SCHEDULE_FIELDS, 'allows_overnight', 'updated_at']
        read_only_fields = fields


class PricingProfileSerializer(serializers.ModelSerializer):
    """Pricing profile; used for both reading and updating."""

    class Meta:
        model = PricingProfile
        fields = [
            'initial_investment',
            'investment_return_months',
            'include_investment',
            'working_capital_goal',
            'working_capital_months',
            'include_working_capital',
            'updated_at',
        ]
        read_only_fields = ['updated_at']


class DayHoursSerializer(serializers.Serializer):
    day = serializers.CharField()
    label = serializers.CharField()
    start = serializers.CharField()
    end = serializers.CharField()
    is_active = serializers.BooleanField()
    is_configured = serializers.BooleanField()
    raw_minutes = serializers.IntegerField()
    net_minutes = serializers.IntegerField()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['net_time'] = format_minutes(data['net_minutes'])
        return data


class PricingAddonsSerializer(serializers.Serializer):
    investment_per_hour = serializers.DecimalField(max_digits=14, decimal_places=2)
    working_capital_per_hour = serializers.DecimalField(max_digits=14, decimal_places=2)
    suggested_minimum_rate = serializers.DecimalField(max_digits=14, decimal_places=2)


class HourlyCostResponseSerializer(serializers.Serializer):
    """Hourly-cost breakdown with pricing add-ons."""

    month = serializers.IntegerField()
    year = serializers.IntegerField()
    strategy = serializers.CharField()
    active_days = serializers.IntegerField()
    total_weekly_minutes = serializers.IntegerField()
    total_weekly_hours = serializers.DecimalField(max_digits=10, decimal_places=2)
    average_daily_hours = serializers.DecimalField(max_digits=10, decimal_places=2)
    monthly_hours = serializers.DecimalField(max_digits=10, decimal_places=2)
    working_days_per_month = serializers.DecimalField(max_digits=10, decimal_places=2)
    daily_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_costs = serializers.DecimalField(max_digits=14, decimal_places=2)
    hourly_rate = serializers.DecimalField(max_digits=14, decimal_places=2)
    breakdown = DayHoursSerializer(many=True)
    addons = PricingAddonsSerializer()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['total_weekly_time'] = format_minutes(data['total_weekly_minutes'])
        return data



class CategoryTotalSerializer(serializers.Serializer):
    category = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)


class MonthTotalSerializer(serializers.Serializer):
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    label = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)


class CostAnalysisSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    fixed_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    variable_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()
    previous_month_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    percent_change = serializers.DecimalField(max_digits=10, decimal_places=1)
    categories = CategoryTotalSerializer(many=True)
    evolution = MonthTotalSerializer(many=True)
