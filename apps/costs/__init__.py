"""
Costs App - Operational Cost Management

This app holds the shop's declared expenses (operational costs), its weekly
operating-hours schedule and the pricing profile, and derives the minimum
cost-per-hour used to price services.

Key Features:
- One-off and recurring cost definitions (recurring series are materialized
  as one row per occurrence sharing a recurrence group)
- Weekly operating-hours schedule with a fixed lunch deduction
- Cost-per-hour calculation with two named strategies
- Investment and working-capital add-ons on top of the hourly rate
- Cost analysis by period and category

Architecture:
- Models: CostDefinition, OperatingHoursSchedule, PricingProfile
- Services: ledger, cost_management, operating_hours, hourly_cost, cost_analysis
- Views: CostDefinitionViewSet plus function views for schedule and reports
"""

__version__ = '1.0.0'
