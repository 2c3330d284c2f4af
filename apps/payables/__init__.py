"""
Payables App - Accounts Payable

Merges the shop's cost definitions with the payments registered against
them into one list of obligations per month, each with a single status.

Key Features:
- Reconciliation of cost definitions and payment records (one item per
  obligation, never two)
- Overdue derivation against an explicit "today"
- Full and partial payment registration with snapshot semantics
- Status buckets, text search and month summaries
- Due-today and overdue alerts

Architecture:
- Models: PaymentRecord
- Services: ledger, reconciliation, payment_registration
- Views: Function views for the monthly list, registration and alerts
"""

__version__ = '1.0.0'
