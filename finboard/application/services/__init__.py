"""Application services: dashboard aggregation and ledger mutations."""

from finboard.application.services.budget_service import BudgetService
from finboard.application.services.dashboard_aggregation import DashboardAggregator
from finboard.application.services.transaction_service import TransactionService

__all__ = [
    "BudgetService",
    "DashboardAggregator",
    "TransactionService",
]
