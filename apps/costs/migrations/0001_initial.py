# Generated manually for operational costs

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


def _day_fields():
    fields = []
    for day in ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday'):
        fields.append((f'{day}_start', models.CharField(blank=True, max_length=5)))
        fields.append((f'{day}_end', models.CharField(blank=True, max_length=5)))
    return fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CostDefinition',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=255)),
                ('value', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('type', models.CharField(choices=[('fixed', 'Fixed'), ('variable', 'Variable')], default='fixed', max_length=10)),
                ('expense_date', models.DateField(blank=True, null=True)),
                ('is_recurring', models.BooleanField(default=False)),
                ('recurrence_frequency', models.CharField(blank=True, choices=[('daily', 'Daily'), ('weekly', 'Weekly'), ('monthly', 'Monthly'), ('yearly', 'Yearly')], max_length=10, null=True)),
                ('recurrence_end_date', models.DateField(blank=True, null=True)),
                ('recurrence_group_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('observation', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cost_definitions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'operational_costs',
                'ordering': ['expense_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'expense_date'], name='opcost_owner_date_idx'),
                    models.Index(fields=['owner', 'type'], name='opcost_owner_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OperatingHoursSchedule',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                *_day_fields(),
                ('allows_overnight', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='operating_hours', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'operational_hours',
            },
        ),
        migrations.CreateModel(
            name='PricingProfile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('initial_investment', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('investment_return_months', models.PositiveIntegerField(default=36)),
                ('include_investment', models.BooleanField(default=False)),
                ('working_capital_goal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('working_capital_months', models.PositiveIntegerField(default=6)),
                ('include_working_capital', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='pricing_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'pricing_profiles',
            },
        ),
    ]
