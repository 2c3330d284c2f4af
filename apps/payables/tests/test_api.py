import pytest
from datetime import date, timedelta
from decimal import Decimal
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.payables.models import PaymentRecord


# =============================================================================
# Payables List Tests
# =============================================================================

@pytest.mark.django_db
class TestPayablesList:
    """Tests for GET /api/payables/"""

    def test_unpaid_cost_is_listed_as_virtual(self, authenticated_client, rent):
        response = authenticated_client.get(
            reverse('payables:payables-list'), {'month': 3, 'year': 2024}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['month'] == 3
        assert response.data['year'] == 2024
        assert len(response.data['items']) == 1

        item = response.data['items'][0]
        assert item['id'] == f'virtual-{rent.id}'
        assert item['is_virtual'] is True
        assert item['status'] == 'overdue'
        assert item['category'] == 'Aluguel'
        assert item['amount_original'] == '1000.00'

    def test_summary(self, authenticated_client, rent, make_payment):
        make_payment(amount_paid=Decimal('100.00'), status='partially_paid')

        response = authenticated_client.get(
            reverse('payables:payables-list'), {'month': 3, 'year': 2024}
        )

        summary = response.data['summary']
        assert summary['count'] == 2
        assert summary['total_amount'] == '1300.00'
        assert summary['total_paid'] == '100.00'
        assert summary['outstanding'] == '1200.00'
        assert summary['by_status'] == {'overdue': 1, 'partially_paid': 1}

    def test_status_and_search_filters(self, authenticated_client, rent, make_payment):
        make_payment(description='Energia', amount_paid=Decimal('300.00'), status='paid')
        make_payment(description='Água', amount_paid=Decimal('300.00'), status='paid')

        response = authenticated_client.get(reverse('payables:payables-list'), {
            'month': 3,
            'year': 2024,
            'status': 'paid',
            'search': 'ENER',
        })

        assert response.status_code == status.HTTP_200_OK
        assert [item['description'] for item in response.data['items']] == ['Energia']

    def test_unknown_status_rejected(self, authenticated_client):
        response = authenticated_client.get(
            reverse('payables:payables-list'), {'status': 'open'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_month_rejected(self, authenticated_client):
        response = authenticated_client.get(
            reverse('payables:payables-list'), {'month': 13, 'year': 2024}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_owner_sees_nothing(self, other_client, rent, make_payment):
        make_payment()

        response = other_client.get(
            reverse('payables:payables-list'), {'month': 3, 'year': 2024}
        )

        assert response.data['items'] == []
        assert response.data['summary']['count'] == 0

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('payables:payables-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Register Payment Tests
# =============================================================================

@pytest.mark.django_db
class TestRegisterPayment:
    """Tests for POST /api/payables/register/"""

    def test_pay_virtual_item(self, authenticated_client, rent):
        response = authenticated_client.post(reverse('payables:register-payment'), {
            'cost_definition_id': str(rent.id),
            'amount_paid': '1000.00',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'paid'
        assert response.data['description'] == 'Aluguel'
        assert response.data['due_date'] == '2024-03-05'
        assert PaymentRecord.objects.filter(cost_definition=rent).count() == 1

    def test_partial_then_full(self, authenticated_client, rent):
        first = authenticated_client.post(reverse('payables:register-payment'), {
            'cost_definition_id': str(rent.id),
            'amount_paid': '250.00',
        }, format='json')
        assert first.data['status'] == 'partially_paid'

        second = authenticated_client.post(reverse('payables:register-payment'), {
            'payment_id': first.data['id'],
            'amount_paid': '1000.00',
        }, format='json')

        assert second.status_code == status.HTTP_200_OK
        assert second.data['id'] == first.data['id']
        assert second.data['status'] == 'paid'
        assert PaymentRecord.objects.count() == 1

    @pytest.mark.parametrize('amount', ['abc', '-10.00'])
    def test_invalid_amount(self, authenticated_client, rent, amount):
        response = authenticated_client.post(reverse('payables:register-payment'), {
            'cost_definition_id': str(rent.id),
            'amount_paid': amount,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount_paid' in response.data
        assert PaymentRecord.objects.count() == 0

    def test_missing_target(self, authenticated_client):
        response = authenticated_client.post(reverse('payables:register-payment'), {
            'amount_paid': '10.00',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_foreign_definition(self, other_client, rent):
        response = other_client.post(reverse('payables:register-payment'), {
            'cost_definition_id': str(rent.id),
            'amount_paid': '10.00',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert PaymentRecord.objects.count() == 0

    def test_foreign_payment(self, other_client, make_payment):
        payment = make_payment()

        response = other_client.post(reverse('payables:register-payment'), {
            'payment_id': str(payment.id),
            'amount_paid': '10.00',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        payment.refresh_from_db()
        assert payment.amount_paid is None

    def test_unauthenticated(self, api_client, rent):
        response = api_client.post(reverse('payables:register-payment'), {
            'cost_definition_id': str(rent.id),
            'amount_paid': '10.00',
        }, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Alerts Tests
# =============================================================================

@pytest.mark.django_db
class TestDueAlerts:
    """Tests for GET /api/payables/alerts/"""

    def test_alerts_for_current_month(self, authenticated_client, make_payment):
        today = timezone.localdate()
        make_payment(description='Hoje', due_date=today)
        make_payment(description='Pago', due_date=today, status='paid',
                     amount_paid=Decimal('300.00'))

        response = authenticated_client.get(reverse('payables:due-alerts'))

        assert response.status_code == status.HTTP_200_OK
        assert [(a['kind'], a['item']['description']) for a in response.data] == [
            ('due_today', 'Hoje'),
        ]

    def test_overdue_alert(self, authenticated_client, make_payment):
        today = timezone.localdate()
        if today.day == 1:
            pytest.skip('No earlier day in the current month')
        make_payment(description='Atrasada', due_date=today - timedelta(days=1))

        response = authenticated_client.get(reverse('payables:due-alerts'))

        assert response.data[0]['kind'] == 'overdue'
        assert response.data[0]['item']['status'] == 'overdue'


# =============================================================================
# Payment History Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentHistory:
    """Tests for /api/payables/payments/"""

    def test_list_own_payments(self, authenticated_client, make_payment, other_owner):
        make_payment(description='Energia')
        make_payment(owner=other_owner, description='Alheio')

        response = authenticated_client.get(reverse('payables:payment-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['description'] == 'Energia'

    def test_list_filters(self, authenticated_client, make_payment):
        make_payment(description='Março', due_date=date(2024, 3, 10))
        make_payment(description='Abril', due_date=date(2024, 4, 10), status='paid',
                     amount_paid=Decimal('300.00'))

        response = authenticated_client.get(reverse('payables:payment-list'), {
            'date_from': '2024-04-01',
            'status': 'paid',
        })

        assert [row['description'] for row in response.data['results']] == ['Abril']

    def test_retrieve(self, authenticated_client, make_payment):
        payment = make_payment()

        response = authenticated_client.get(
            reverse('payables:payment-detail', kwargs={'pk': payment.id})
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(payment.id)

    def test_retrieve_foreign_payment(self, other_client, make_payment):
        payment = make_payment()

        response = other_client.get(
            reverse('payables:payment-detail', kwargs={'pk': payment.id})
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_history_is_read_only(self, authenticated_client, make_payment):
        payment = make_payment()

        response = authenticated_client.delete(
            reverse('payables:payment-detail', kwargs={'pk': payment.id})
        )

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert PaymentRecord.objects.filter(id=payment.id).exists()
