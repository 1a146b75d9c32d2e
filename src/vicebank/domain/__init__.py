"""Domain layer for vicebank."""

BUDGET_TYPES = (
    "DatedExpenseTarget",
    "Expense",
    "ExpenseTarget",
    "ExpenseTargetType",
    "MonthlyExpenseTarget",
    "WeeklyExpenseTarget",
)

__all__ = list(BUDGET_TYPES)


# Import budget types lazily; budget depends on utils, which imports this package
def __getattr__(name):
    if name in BUDGET_TYPES:
        from vicebank.domain import budget
        return getattr(budget, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
