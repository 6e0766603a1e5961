"""Mobile dashboard API schemas (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardSummaryResponse(CamelModel):
    """Month totals as 2-decimal strings in the display currency."""

    total_income: str
    total_expenses: str
    net_result: str


class BudgetProgressResponse(CamelModel):
    category_id: str
    category_name: str
    budgeted: str
    spent: str
    remaining: str
    percent_used: int = Field(..., description="Rounded percentage of the budget spent")


class RecentTransactionCategory(CamelModel):
    name: str
    color: str | None = None


class RecentTransactionResponse(CamelModel):
    id: str
    amount: str
    description: str | None = None
    date: str = Field(..., description="YYYY-MM-DD")
    category: RecentTransactionCategory


class MobileDashboardResponse(CamelModel):
    """Response for GET /dashboard."""

    month: str
    currency: str
    summary: DashboardSummaryResponse
    budget_progress: list[BudgetProgressResponse] = Field(default_factory=list)
    recent_transactions: list[RecentTransactionResponse] = Field(default_factory=list)
