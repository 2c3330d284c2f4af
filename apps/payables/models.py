from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    OVERDUE = 'overdue', 'Overdue'
    CANCELLED = 'cancelled', 'Cancelled'
    PARTIALLY_PAID = 'partially_paid', 'Partially paid'


class PaymentRecord(models.Model):
    """
    A realized (or partial) payment against a cost obligation.

    Description and original amount are copied from the cost definition when
    the payment is registered; later edits to the definition do not change
    them, and the payment survives deletion of the definition.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    cost_definition = models.ForeignKey(
        'costs.CostDefinition',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments'
    )

    # Snapshot of the obligation
    description = models.CharField(max_length=255)
    due_date = models.DateField()
    amount_original = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Payment
    amount_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    payment_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )

    # Informational only
    fine_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    interest_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'operational_cost_payments'
        indexes = [
            models.Index(fields=['owner', 'due_date'], name='payment_owner_due_idx'),
            models.Index(fields=['status'], name='payment_status_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['cost_definition', 'due_date'],
                name='payment_unique_obligation'
            ),
        ]
        ordering = ['due_date', 'created_at']

    def __str__(self):
        return f"{self.description} - R$ {self.amount_original} ({self.get_status_display()})"

    def clean(self):
        """Paid rows need an amount and a date; partial rows must be short."""
        if self.status in (PaymentStatus.PAID, PaymentStatus.PARTIALLY_PAID):
            if self.amount_paid is None:
                raise ValidationError({'amount_paid': 'Required for paid payments.'})

        if self.status == PaymentStatus.PAID and self.payment_date is None:
            raise ValidationError({'payment_date': 'Required for paid payments.'})

        if self.status == PaymentStatus.PARTIALLY_PAID and self.amount_paid >= self.amount_original:
            raise ValidationError({
                'amount_paid': 'A partial payment must be less than the original amount.'
            })
