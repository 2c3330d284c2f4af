import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.costs.models import CostDefinition
from apps.payables.models import PaymentRecord


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
    )


@pytest.fixture
def authenticated_client(api_client, owner):
    """Return API client authenticated as the owner."""
    refresh = RefreshToken.for_user(owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_owner):
    """Return API client authenticated as the unrelated shop."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_owner)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def rent(owner):
    """R$ 1000 rent due 2024-03-05."""
    return CostDefinition.objects.create(
        owner=owner,
        description='Aluguel',
        value=Decimal('1000.00'),
        type='fixed',
        expense_date=date(2024, 3, 5),
        category='Aluguel',
    )


@pytest.fixture
def make_payment(owner):
    """Factory creating a stored payment for the owner."""
    def _make_payment(**overrides):
        fields = {
            'owner': owner,
            'description': 'Energia',
            'due_date': date(2024, 3, 10),
            'amount_original': Decimal('300.00'),
            'status': 'pending',
        }
        fields.update(overrides)
        return PaymentRecord.objects.create(**fields)
    return _make_payment
