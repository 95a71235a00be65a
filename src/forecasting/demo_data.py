"""
Demo Data Generator

Generates realistic household transactions for demonstrations and testing.
Each profile produces monthly salary income and a spread of expense
transactions with growth, annual seasonality and random variance.
"""

import random
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from .models import Transaction, TransactionKind, add_months

# Household profiles with realistic monthly figures
HOUSEHOLD_PROFILES = {
    "single_professional": {
        "name": "Single Professional",
        "income_range": (4200, 6500),
        "expense_ratio": (0.55, 0.75),
        "income_growth": (0.00, 0.04),
        "expense_growth": (0.01, 0.05),
        "expense_count": (12, 25),
        "seasonality": [1.05, 0.90, 0.95, 1.00, 1.00, 1.10, 1.15, 1.10, 0.95, 0.95, 1.05, 1.30],
    },
    "young_family": {
        "name": "Young Family",
        "income_range": (6000, 9500),
        "expense_ratio": (0.75, 0.95),
        "income_growth": (0.01, 0.05),
        "expense_growth": (0.02, 0.06),
        "expense_count": (25, 45),
        "seasonality": [1.00, 0.90, 0.95, 1.00, 1.00, 1.05, 1.20, 1.15, 1.10, 0.95, 1.00, 1.40],
    },
    "retired_couple": {
        "name": "Retired Couple",
        "income_range": (3500, 5200),
        "expense_ratio": (0.70, 0.90),
        "income_growth": (0.00, 0.02),
        "expense_growth": (0.00, 0.03),
        "expense_count": (10, 20),
        "seasonality": [1.10, 1.00, 1.05, 1.00, 0.95, 0.95, 1.00, 1.00, 0.95, 0.95, 1.00, 1.15],
    },
    "freelancer": {
        "name": "Freelancer",
        "income_range": (3000, 8000),
        "expense_ratio": (0.50, 0.80),
        "income_growth": (0.02, 0.08),
        "expense_growth": (0.01, 0.04),
        "expense_count": (15, 30),
        "seasonality": [0.85, 0.90, 1.00, 1.05, 1.05, 1.00, 0.85, 0.80, 1.05, 1.10, 1.10, 1.25],
    },
}


@dataclass
class GeneratedHousehold:
    """Generated household with its transaction history"""
    profile: str
    name: str
    monthly_income: float
    monthly_expenses: float
    transactions: List[Transaction]

    def totals_by_kind(self) -> Dict[str, float]:
        totals = {kind.value: 0.0 for kind in TransactionKind}
        for txn in self.transactions:
            totals[txn.kind.value] += txn.amount
        return {k: round(v, 2) for k, v in totals.items()}


class DemoDataGenerator:
    """Generates household transaction histories"""

    def __init__(self, seed: Optional[int] = None):
        """Initialize generator with optional random seed for reproducibility"""
        self._random = random.Random(seed)

    def generate_household(
        self,
        profile: str = "young_family",
        months: int = 24,
        as_of: Optional[date] = None
    ) -> GeneratedHousehold:
        """
        Generate a household with `months` of history ending at as_of's month.

        Args:
            profile: Key of HOUSEHOLD_PROFILES
            months: Number of months of history
            as_of: Last month of history (required for deterministic dates)
        """
        if profile not in HOUSEHOLD_PROFILES:
            raise ValueError(f"Unknown household profile: {profile}")
        if as_of is None:
            raise ValueError("as_of is required")

        rng = self._random
        config = HOUSEHOLD_PROFILES[profile]

        base_income = rng.uniform(*config["income_range"])
        base_expenses = base_income * rng.uniform(*config["expense_ratio"])
        income_growth = rng.uniform(*config["income_growth"]) / 12
        expense_growth = rng.uniform(*config["expense_growth"]) / 12

        anchor = date(as_of.year, as_of.month, 1)
        first_month = add_months(anchor, -(months - 1))
        transactions: List[Transaction] = []

        for i in range(months):
            month = add_months(first_month, i)
            season = config["seasonality"][month.month - 1]

            income = base_income * ((1 + income_growth) ** i) * rng.uniform(0.97, 1.03)
            transactions.append(Transaction(
                date=month.replace(day=25),  # payday
                kind=TransactionKind.INCOME,
                amount=round(income, 2)
            ))

            expenses = base_expenses * ((1 + expense_growth) ** i) * season
            expenses *= rng.uniform(0.92, 1.08)  # Random variance
            transactions.extend(self._split_expenses(month, expenses, config["expense_count"]))

        return GeneratedHousehold(
            profile=profile,
            name=config["name"],
            monthly_income=round(base_income, 2),
            monthly_expenses=round(base_expenses, 2),
            transactions=transactions
        )

    def _split_expenses(
        self,
        month: date,
        total: float,
        count_range
    ) -> List[Transaction]:
        """Break a monthly expense total into individual purchases"""
        rng = self._random
        count = rng.randint(*count_range)
        weights = [rng.uniform(0.2, 1.0) for _ in range(count)]
        weight_sum = sum(weights)

        return [
            Transaction(
                date=month.replace(day=rng.randint(1, 28)),
                kind=TransactionKind.EXPENSE,
                amount=round(total * w / weight_sum, 2)
            )
            for w in weights
        ]

    def generate_demo_set(self, months: int = 24, as_of: Optional[date] = None) -> List[GeneratedHousehold]:
        """Generate one household per profile"""
        return [
            self.generate_household(profile, months=months, as_of=as_of)
            for profile in HOUSEHOLD_PROFILES
        ]
