"""CLI interface for budgetbook."""
