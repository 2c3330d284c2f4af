from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


WEEKDAYS = [
    ('monday', 'Segunda'),
    ('tuesday', 'Terça'),
    ('wednesday', 'Quarta'),
    ('thursday', 'Quinta'),
    ('friday', 'Sexta'),
    ('saturday', 'Sábado'),
    ('sunday', 'Domingo'),
]


class CostType(models.TextChoices):
    FIXED = 'fixed', 'Fixed'
    VARIABLE = 'variable', 'Variable'


class RecurrenceFrequency(models.TextChoices):
    DAILY = 'daily', 'Daily'
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'
    YEARLY = 'yearly', 'Yearly'


class CostDefinition(models.Model):
    """
    A declared expense obligation (operational cost).

    Recurring costs are stored as one row per occurrence; rows created from
    the same series share ``recurrence_group_id``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='cost_definitions'
    )

    description = models.CharField(max_length=255)
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    type = models.CharField(
        max_length=10,
        choices=CostType.choices,
        default=CostType.FIXED
    )
    expense_date = models.DateField(null=True, blank=True)

    # Recurrence
    is_recurring = models.BooleanField(default=False)
    recurrence_frequency = models.CharField(
        max_length=10,
        choices=RecurrenceFrequency.choices,
        null=True,
        blank=True
    )
    recurrence_end_date = models.DateField(null=True, blank=True)
    recurrence_group_id = models.UUIDField(null=True, blank=True, db_index=True)

    category = models.CharField(max_length=100, blank=True)
    observation = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'operational_costs'
        indexes = [
            models.Index(fields=['owner', 'expense_date'], name='opcost_owner_date_idx'),
            models.Index(fields=['owner', 'type'], name='opcost_owner_type_idx'),
        ]
        ordering = ['expense_date', 'created_at']

    def __str__(self):
        return f"{self.description} - R$ {self.value} ({self.expense_date or 'sem data'})"

    def clean(self):
        """Enforce the recurrence invariant."""
        if self.is_recurring and not self.recurrence_frequency:
            raise ValidationError({
                'recurrence_frequency': 'Recurring costs need a frequency.'
            })
        if not self.is_recurring and self.recurrence_frequency:
            raise ValidationError({
                'recurrence_frequency': 'Only recurring costs can have a frequency.'
            })

    @property
    def effective_category(self):
        """Category used for grouping; blank falls into the default bucket."""
        return self.category or settings.PRECIFIX['DEFAULT_COST_CATEGORY']


class OperatingHoursSchedule(models.Model):
    """
    Weekly opening hours of a shop (one row per owner).

    Times are free text ``HH:MM``; a blank pair means the day is not worked.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='operating_hours'
    )

    monday_start = models.CharField(max_length=5, blank=True)
    monday_end = models.CharField(max_length=5, blank=True)
    tuesday_start = models.CharField(max_length=5, blank=True)
    tuesday_end = models.CharField(max_length=5, blank=True)
    wednesday_start = models.CharField(max_length=5, blank=True)
    wednesday_end = models.CharField(max_length=5, blank=True)
    thursday_start = models.CharField(max_length=5, blank=True)
    thursday_end = models.CharField(max_length=5, blank=True)
    friday_start = models.CharField(max_length=5, blank=True)
    friday_end = models.CharField(max_length=5, blank=True)
    saturday_start = models.CharField(max_length=5, blank=True)
    saturday_end = models.CharField(max_length=5, blank=True)
    sunday_start = models.CharField(max_length=5, blank=True)
    sunday_end = models.CharField(max_length=5, blank=True)

    # When set, an end time earlier than the start runs past midnight
    allows_overnight = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'operational_hours'

    def __str__(self):
        return f"Operating hours for {self.owner}"

    def get_day_times(self, day):
        """Return the ``(start, end)`` strings stored for a weekday key."""
        return getattr(self, f'{day}_start') or '', getattr(self, f'{day}_end') or ''


class PricingProfile(models.Model):
    """Investment payback and working-capital goals folded into the hourly rate."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='pricing_profile'
    )

    initial_investment = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    investment_return_months = models.PositiveIntegerField(default=36)
    include_investment = models.BooleanField(default=False)

    working_capital_goal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    working_capital_months = models.PositiveIntegerField(default=6)
    include_working_capital = models.BooleanField(default=False)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pricing_profiles'

    def __str__(self):
        return f"Pricing profile for {self.owner}"
