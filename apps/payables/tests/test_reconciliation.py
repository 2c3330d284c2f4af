"""
Unit tests for the reconciliation engine.

Definitions and payments are unsaved model instances; no database is used.
"""

import uuid
import pytest
from datetime import date
from decimal import Decimal

from apps.costs.models import CostDefinition
from apps.payables.models import PaymentRecord
from apps.payables.services import (
    InvalidStatusFilterError,
    build_payable_items,
    compute_paid_status,
    derive_payment_status,
    filter_payable_items,
    summarize_payable_items,
)


def definition(description='Aluguel', value='1000.00', expense_date=date(2024, 3, 5), **extra):
    return CostDefinition(
        id=uuid.uuid4(),
        description=description,
        value=Decimal(value),
        type='fixed',
        expense_date=expense_date,
        **extra
    )


def payment(cost=None, status='pending', due_date=date(2024, 3, 5),
            amount_original='1000.00', amount_paid=None, description=None):
    return PaymentRecord(
        id=uuid.uuid4(),
        cost_definition=cost,
        description=description or (cost.description if cost else 'Avulso'),
        due_date=due_date,
        amount_original=Decimal(amount_original),
        amount_paid=Decimal(amount_paid) if amount_paid is not None else None,
        status=status,
    )


def reconcile(definitions, payments, today, month=3, year=2024):
    return build_payable_items(
        cost_definitions=definitions,
        payments=payments,
        month=month,
        year=year,
        today=today,
    )


# =============================================================================
# Merge Tests
# =============================================================================

class TestBuildPayableItems:

    def test_unpaid_definition_becomes_virtual_item(self):
        rent = definition()

        items = reconcile([rent], [], today=date(2024, 3, 1))

        assert len(items) == 1
        item = items[0]
        assert item.id == f'virtual-{rent.id}'
        assert item.is_virtual is True
        assert item.cost_definition_id == rent.id
        assert item.amount_original == Decimal('1000.00')
        assert item.amount_paid is None
        assert item.status == 'open'

    def test_unpaid_definition_after_due_date_is_overdue(self):
        items = reconcile([definition()], [], today=date(2024, 3, 6))

        assert items[0].status == 'overdue'

    def test_paid_definition_yields_single_paid_item(self):
        rent = definition()
        paid = payment(rent, status='paid', amount_paid='1000.00')

        items = reconcile([rent], [paid], today=date(2024, 4, 1))

        assert len(items) == 1
        assert items[0].id == str(paid.id)
        assert items[0].is_virtual is False
        assert items[0].status == 'paid'

    def test_overdue_boundary(self):
        """Due today is still open; due yesterday is overdue."""
        cost = definition(expense_date=date(2024, 1, 1))

        before = reconcile([cost], [], today=date(2024, 2, 1), month=1)
        same_day = reconcile([cost], [], today=date(2024, 1, 1), month=1)

        assert before[0].status == 'overdue'
        assert same_day[0].status == 'open'

    def test_every_definition_appears_exactly_once(self):
        costs = [
            definition(description=f'Custo {day}', expense_date=date(2024, 3, day))
            for day in (1, 8, 15, 22, 29)
        ]
        payments = [
            payment(costs[1], status='paid', due_date=date(2024, 3, 8), amount_paid='1000.00'),
            payment(costs[3], status='partially_paid', due_date=date(2024, 3, 22), amount_paid='10.00'),
        ]

        items = reconcile(costs, payments, today=date(2024, 3, 20))

        assert len(items) == len(costs)
        for cost in costs:
            assert [item.cost_definition_id for item in items].count(cost.id) == 1

    def test_definitions_outside_month_are_ignored(self):
        costs = [
            definition(expense_date=date(2024, 2, 29)),
            definition(expense_date=date(2024, 4, 1)),
            definition(expense_date=None),
        ]

        assert reconcile(costs, [], today=date(2024, 3, 1)) == []

    def test_payment_without_definition_uses_snapshot(self):
        orphan = payment(None, status='paid', description='Conta antiga',
                         amount_original='80.00', amount_paid='80.00')

        items = reconcile([], [orphan], today=date(2024, 3, 1))

        assert len(items) == 1
        assert items[0].description == 'Conta antiga'
        assert items[0].amount_original == Decimal('80.00')
        assert items[0].cost_definition_id is None

    def test_sorted_by_due_date_with_real_items_first_on_ties(self):
        late = definition(description='Late', expense_date=date(2024, 3, 20))
        tie = definition(description='Tie', expense_date=date(2024, 3, 5))
        stored = payment(None, status='pending', due_date=date(2024, 3, 5), description='Stored')
        early = payment(None, status='paid', due_date=date(2024, 3, 1),
                        description='Early', amount_paid='1000.00')

        items = reconcile([late, tie], [stored, early], today=date(2024, 3, 1))

        assert [item.description for item in items] == ['Early', 'Stored', 'Tie', 'Late']

    def test_reconciliation_is_repeatable(self):
        costs = [definition(), definition(expense_date=date(2024, 3, 25))]
        payments = [payment(None, status='pending', due_date=date(2024, 3, 2))]

        first = reconcile(costs, payments, today=date(2024, 3, 10))
        second = reconcile(costs, payments, today=date(2024, 3, 10))

        assert first == second
        assert [item.status for item in first] == ['overdue', 'overdue', 'open']

    def test_missing_category_uses_default_bucket(self):
        items = reconcile([definition(category='')], [], today=date(2024, 3, 1))

        assert items[0].category == 'Outros'


# =============================================================================
# Status Tests
# =============================================================================

class TestDerivePaymentStatus:

    def test_pending_past_due_reads_overdue(self):
        assert derive_payment_status(
            stored_status='pending',
            due_date=date(2024, 3, 1),
            today=date(2024, 3, 2),
        ) == 'overdue'

    def test_pending_due_today_stays_pending(self):
        assert derive_payment_status(
            stored_status='pending',
            due_date=date(2024, 3, 2),
            today=date(2024, 3, 2),
        ) == 'pending'

    @pytest.mark.parametrize('stored', ['paid', 'partially_paid', 'cancelled'])
    def test_settled_statuses_never_change(self, stored):
        assert derive_payment_status(
            stored_status=stored,
            due_date=date(2020, 1, 1),
            today=date(2024, 3, 2),
        ) == stored


class TestComputePaidStatus:

    def test_exact_amount_is_paid(self):
        assert compute_paid_status(
            amount_paid=Decimal('1000.00'),
            amount_original=Decimal('1000.00'),
        ) == 'paid'

    def test_one_cent_short_is_partial(self):
        assert compute_paid_status(
            amount_paid=Decimal('999.99'),
            amount_original=Decimal('1000.00'),
        ) == 'partially_paid'

    def test_overpayment_is_paid(self):
        assert compute_paid_status(
            amount_paid=Decimal('1200.00'),
            amount_original=Decimal('1000.00'),
        ) == 'paid'


# =============================================================================
# Filter And Summary Tests
# =============================================================================

class TestFilterAndSummary:

    @pytest.fixture
    def items(self):
        costs = [
            definition(description='Aluguel', expense_date=date(2024, 3, 1)),
            definition(description='Internet', expense_date=date(2024, 3, 20)),
            definition(description='Energia', expense_date=date(2024, 3, 12)),
            definition(description='Seguro', expense_date=date(2024, 3, 15)),
        ]
        payments = [
            payment(costs[2], status='partially_paid', due_date=date(2024, 3, 12),
                    amount_paid='400.00'),
            payment(costs[3], status='paid', due_date=date(2024, 3, 15),
                    amount_paid='1100.00'),
            payment(None, status='pending', due_date=date(2024, 3, 25), description='Água'),
            payment(None, status='cancelled', due_date=date(2024, 3, 26), description='Multa'),
        ]
        return reconcile(costs, payments, today=date(2024, 3, 10))

    def test_pending_bucket_includes_open(self, items):
        result = filter_payable_items(items, status='pending')

        assert {item.description for item in result} == {'Internet', 'Água'}

    def test_single_status_buckets(self, items):
        assert [i.description for i in filter_payable_items(items, status='overdue')] == ['Aluguel']
        assert [i.description for i in filter_payable_items(items, status='paid')] == ['Seguro']
        assert [i.description for i in filter_payable_items(items, status='partially_paid')] == ['Energia']
        assert [i.description for i in filter_payable_items(items, status='cancelled')] == ['Multa']

    def test_all_bucket(self, items):
        assert len(filter_payable_items(items)) == 6

    def test_search_is_case_insensitive(self, items):
        result = filter_payable_items(items, search='INTER')

        assert [item.description for item in result] == ['Internet']

    def test_unknown_bucket_raises(self, items):
        with pytest.raises(InvalidStatusFilterError):
            filter_payable_items(items, status='open')

    def test_summary(self, items):
        summary = summarize_payable_items(items)

        assert summary['count'] == 6
        assert summary['total_amount'] == Decimal('6000.00')
        assert summary['total_paid'] == Decimal('1500.00')
        # Aluguel 1000 + Internet 1000 + Energia 600 + Água 1000
        assert summary['outstanding'] == Decimal('3600.00')
        assert summary['by_status'] == {
            'overdue': 1,
            'partially_paid': 1,
            'paid': 1,
            'open': 1,
            'pending': 1,
            'cancelled': 1,
        }
