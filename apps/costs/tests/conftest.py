import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.costs.models import CostDefinition, OperatingHoursSchedule


WEEKDAYS_OPEN = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday')


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Create and return the shop owner."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        business_name='Brilho Estética Automotiva',
    )


@pytest.fixture
def other_owner(db):
    """Create and return a second, unrelated shop."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        business_name='Lava Rápido Central',
    )


@pytest.fixture
def authenticated_client(api_client, owner):
    """Return API client authenticated as the owner."""
    refresh = RefreshToken.for_user(owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def make_cost(owner):
    """Factory creating a cost definition for the owner."""
    def _make_cost(**overrides):
        fields = {
            'owner': owner,
            'description': 'Aluguel',
            'value': Decimal('1000.00'),
            'type': 'fixed',
            'expense_date': date(2024, 3, 5),
        }
        fields.update(overrides)
        return CostDefinition.objects.create(**fields)
    return _make_cost


def weekday_schedule(start='08:00', end='18:00', **extra):
    """Unsaved schedule open Monday to Friday."""
    hours = {}
    for day in WEEKDAYS_OPEN:
        hours[f'{day}_start'] = start
        hours[f'{day}_end'] = end
    hours.update(extra)
    return OperatingHoursSchedule(**hours)


@pytest.fixture
def schedule(owner):
    """Saved Monday-Friday 08:00-18:00 schedule."""
    instance = weekday_schedule()
    instance.owner = owner
    instance.save()
    return instance


@pytest.fixture
def other_client(other_owner):
    """Return API client authenticated as the unrelated shop."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_owner)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
