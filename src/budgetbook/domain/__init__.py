"""Domain layer for budgetbook application."""

# Services are resolved lazily so that the database layer can import
# domain entities without pulling in the services that depend on it.
_SERVICES = {
    "AccountService": "budgetbook.domain.account",
    "CategoryService": "budgetbook.domain.category",
    "PlanService": "budgetbook.domain.plan",
    "TransactionService": "budgetbook.domain.transaction",
    "CSVImportService": "budgetbook.domain.csv_import",
    "SummaryService": "budgetbook.domain.summary",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
