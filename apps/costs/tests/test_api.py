import pytest
from datetime import date
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.costs.models import CostDefinition, OperatingHoursSchedule, PricingProfile


# =============================================================================
# Cost Definition Tests
# =============================================================================

@pytest.mark.django_db
class TestCostList:
    """Tests for GET /api/costs/definitions/"""

    def test_list_returns_only_own_costs(self, authenticated_client, make_cost, other_owner):
        make_cost(description='Aluguel')
        make_cost(owner=other_owner, description='Alheio')

        response = authenticated_client.get(reverse('costs:cost-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['description'] == 'Aluguel'

    def test_list_filters(self, authenticated_client, make_cost):
        make_cost(description='Aluguel', type='fixed', expense_date=date(2024, 3, 5))
        make_cost(description='Shampoo', type='variable', category='Insumos',
                  expense_date=date(2024, 3, 9))
        make_cost(description='Aluguel', type='fixed', expense_date=date(2024, 4, 5))

        response = authenticated_client.get(reverse('costs:cost-list'), {
            'date_from': '2024-03-01',
            'date_to': '2024-03-31',
            'type': 'variable',
            'search': 'insumos',
        })

        assert response.status_code == status.HTTP_200_OK
        assert [row['description'] for row in response.data['results']] == ['Shampoo']

    def test_list_rejects_inverted_dates(self, authenticated_client):
        response = authenticated_client.get(reverse('costs:cost-list'), {
            'date_from': '2024-03-31',
            'date_to': '2024-03-01',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_unauthenticated(self, api_client):
        response = api_client.get(reverse('costs:cost-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestCostCreate:
    """Tests for POST /api/costs/definitions/"""

    def test_create_one_off(self, authenticated_client, owner):
        response = authenticated_client.post(reverse('costs:cost-list'), {
            'description': 'Compra de cera',
            'value': '180.00',
            'type': 'variable',
            'expense_date': '2024-03-12',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 1
        assert response.data[0]['effective_category'] == 'Outros'
        assert CostDefinition.objects.filter(owner=owner).count() == 1

    def test_create_recurring_series(self, authenticated_client, owner):
        response = authenticated_client.post(reverse('costs:cost-list'), {
            'description': 'Aluguel',
            'value': '1500.00',
            'type': 'fixed',
            'expense_date': '2024-01-05',
            'is_recurring': True,
            'recurrence_frequency': 'monthly',
            'recurrence_end_date': '2024-06-05',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 6
        assert CostDefinition.objects.filter(owner=owner).count() == 6

    def test_recurring_without_frequency_is_400(self, authenticated_client):
        response = authenticated_client.post(reverse('costs:cost-list'), {
            'description': 'Aluguel',
            'value': '1500.00',
            'expense_date': '2024-01-05',
            'is_recurring': True,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'recurrence_frequency' in response.data

    def test_negative_value_is_400(self, authenticated_client):
        response = authenticated_client.post(reverse('costs:cost-list'), {
            'description': 'Erro',
            'value': '-10.00',
            'expense_date': '2024-01-05',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'value' in response.data


@pytest.mark.django_db
class TestCostDetail:
    """Tests for /api/costs/definitions/{id}/"""

    def test_retrieve_foreign_cost_is_404(self, other_client, make_cost):
        cost = make_cost()

        response = other_client.get(reverse('costs:cost-detail', args=[cost.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_partial_update(self, authenticated_client, make_cost):
        cost = make_cost()

        response = authenticated_client.patch(
            reverse('costs:cost-detail', args=[cost.id]),
            {'value': '1200.00'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['value'] == '1200.00'

    def test_update_foreign_cost_is_404(self, other_client, make_cost):
        cost = make_cost()

        response = other_client.patch(
            reverse('costs:cost-detail', args=[cost.id]),
            {'value': '1.00'},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['detail'].code == 'cost_not_found'

    def test_delete_series(self, authenticated_client, owner):
        authenticated_client.post(reverse('costs:cost-list'), {
            'description': 'Aluguel',
            'value': '1500.00',
            'expense_date': '2024-01-05',
            'is_recurring': True,
            'recurrence_frequency': 'monthly',
            'recurrence_end_date': '2024-03-05',
        }, format='json')
        first = CostDefinition.objects.filter(owner=owner).first()

        url = reverse('costs:cost-detail', args=[first.id])
        response = authenticated_client.delete(f'{url}?delete_series=true')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert CostDefinition.objects.filter(owner=owner).count() == 0

    def test_delete_single(self, authenticated_client, make_cost):
        cost = make_cost()
        other = make_cost(description='Energia')

        response = authenticated_client.delete(reverse('costs:cost-detail', args=[cost.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert list(CostDefinition.objects.all()) == [other]


# =============================================================================
# Operating Hours And Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestOperatingHours:
    """Tests for /api/costs/operating-hours/"""

    def test_get_without_schedule(self, authenticated_client):
        response = authenticated_client.get(reverse('costs:operating-hours'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['monday_start'] == ''
        assert response.data['allows_overnight'] is False

    def test_put_saves_schedule(self, authenticated_client, owner):
        response = authenticated_client.put(reverse('costs:operating-hours'), {
            'monday_start': '08:00',
            'monday_end': '18:00',
            'allows_overnight': True,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        schedule = OperatingHoursSchedule.objects.get(owner=owner)
        assert schedule.monday_end == '18:00'
        assert schedule.allows_overnight is True

    def test_put_invalid_time_is_400(self, authenticated_client, owner):
        response = authenticated_client.put(reverse('costs:operating-hours'), {
            'monday_start': '8h',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'monday_start' in response.data
        assert not OperatingHoursSchedule.objects.filter(owner=owner).exists()


@pytest.mark.django_db
class TestPricingProfile:
    """Tests for /api/costs/pricing-profile/"""

    def test_get_creates_defaults(self, authenticated_client, owner):
        response = authenticated_client.get(reverse('costs:pricing-profile'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['investment_return_months'] == 36
        assert response.data['working_capital_months'] == 6
        assert PricingProfile.objects.filter(owner=owner).exists()

    def test_put_updates_profile(self, authenticated_client, owner):
        response = authenticated_client.put(reverse('costs:pricing-profile'), {
            'initial_investment': '36000.00',
            'include_investment': True,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        profile = PricingProfile.objects.get(owner=owner)
        assert profile.initial_investment == Decimal('36000.00')
        assert profile.include_investment is True


# =============================================================================
# Report Tests
# =============================================================================

@pytest.mark.django_db
class TestHourlyCost:
    """Tests for GET /api/costs/hourly-cost/"""

    def test_hourly_cost_for_month(self, authenticated_client, schedule, make_cost):
        make_cost(value=Decimal('5000.00'), expense_date=date(2024, 3, 5))

        response = authenticated_client.get(reverse('costs:hourly-cost'), {
            'month': 3,
            'year': 2024,
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['strategy'] == 'weekly_average'
        assert response.data['hourly_rate'] == '25.57'
        assert response.data['monthly_hours'] == '195.53'
        assert len(response.data['breakdown']) == 7
        assert response.data['breakdown'][0]['net_time'] == '09:00'
        assert response.data['breakdown'][5]['net_time'] == '00:00'
        assert response.data['total_weekly_time'] == '45:00'
        assert response.data['addons']['suggested_minimum_rate'] == '25.57'

    def test_daily_average_strategy(self, authenticated_client, schedule, make_cost):
        make_cost(value=Decimal('5000.00'), expense_date=date(2024, 3, 5))

        response = authenticated_client.get(reverse('costs:hourly-cost'), {
            'month': 3,
            'year': 2024,
            'strategy': 'daily_average',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['hourly_rate'] == '27.78'

    def test_addons_from_profile(self, authenticated_client, owner, schedule, make_cost):
        make_cost(value=Decimal('5000.00'), expense_date=date(2024, 3, 5))
        PricingProfile.objects.create(
            owner=owner,
            initial_investment=Decimal('0'),
            working_capital_goal=Decimal('11731.80'),
            working_capital_months=6,
            include_working_capital=True,
        )

        response = authenticated_client.get(reverse('costs:hourly-cost'), {
            'month': 3,
            'year': 2024,
        })

        assert response.data['addons']['working_capital_per_hour'] == '10.00'
        assert response.data['addons']['suggested_minimum_rate'] == '35.57'

    def test_no_schedule_is_zero(self, authenticated_client, make_cost):
        make_cost(value=Decimal('5000.00'), expense_date=date(2024, 3, 5))

        response = authenticated_client.get(reverse('costs:hourly-cost'), {
            'month': 3,
            'year': 2024,
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['hourly_rate'] == '0.00'

    def test_unknown_strategy_is_400(self, authenticated_client):
        response = authenticated_client.get(reverse('costs:hourly-cost'), {
            'strategy': 'magic',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_bad_month_is_400(self, authenticated_client):
        response = authenticated_client.get(reverse('costs:hourly-cost'), {'month': 13})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestCostAnalysisEndpoint:
    """Tests for GET /api/costs/analysis/"""

    def test_analysis(self, authenticated_client, make_cost):
        make_cost(value=Decimal('1000.00'), category='Aluguel')

        response = authenticated_client.get(reverse('costs:analysis'), {
            'start_date': '2024-03-01',
            'end_date': '2024-03-31',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == '1000.00'
        assert response.data['categories'][0]['category'] == 'Aluguel'
        assert len(response.data['evolution']) == 6

    def test_analysis_needs_both_dates(self, authenticated_client):
        response = authenticated_client.get(reverse('costs:analysis'), {
            'start_date': '2024-03-01',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
