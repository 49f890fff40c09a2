from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class IncomeCategory(str, Enum):
    SALARY = "Salário"
    FREELANCE = "Freelance"
    INVESTMENTS = "Investimentos"
    OTHER = "Outros"


class ExpenseCategory(str, Enum):
    FOOD = "Alimentação"
    TRANSPORT = "Transporte"
    HOUSING = "Moradia"
    ENTERTAINMENT = "Entretenimento"
    HEALTH = "Saúde"
    SHOPPING = "Compras"
    OTHER = "Outros"


class GoalCategory(str, Enum):
    TRAVEL = "viagem"
    HOME = "casa"
    CAR = "carro"
    EDUCATION = "educacao"
    EMERGENCY = "emergencia"
    OTHER = "outros"

    @property
    def label(self) -> str:
        return GOAL_CATEGORY_LABELS[self]


GOAL_CATEGORY_LABELS = {
    GoalCategory.TRAVEL: "Viagem",
    GoalCategory.HOME: "Casa",
    GoalCategory.CAR: "Carro",
    GoalCategory.EDUCATION: "Educação",
    GoalCategory.EMERGENCY: "Emergência",
    GoalCategory.OTHER: "Outros",
}

# vocabulary per transaction type, in display order
CATEGORIES = {
    TransactionType.INCOME: tuple(c.value for c in IncomeCategory),
    TransactionType.EXPENSE: tuple(c.value for c in ExpenseCategory),
}


def categories_for(ttype: TransactionType) -> Tuple[str, ...]:
    return CATEGORIES[TransactionType(ttype)]


@dataclass(frozen=True)
class Transaction:
    id: str
    type: TransactionType
    amount: Decimal      # always >= 0, sign comes from type
    category: str        # member of categories_for(type)
    date: date           # date-only, no time component
    description: str = ""


@dataclass(frozen=True)
class Goal:
    id: str
    name: str
    target: Decimal      # > 0
    category: GoalCategory
    current: Decimal = Decimal("0")
    deadline: Optional[date] = None


@dataclass(frozen=True)
class Snapshot:
    """Full contents of both collections at one point in time.

    Hashable, so derived values can be cached per snapshot.
    """
    transactions: Tuple[Transaction, ...] = ()
    goals: Tuple[Goal, ...] = ()


# Input dialogs. Values are kept raw (as typed) until validation.
@dataclass
class TransactionForm:
    type: TransactionType = TransactionType.EXPENSE
    amount: Union[str, int, float, Decimal, None] = ""
    category: str = ""
    description: str = ""
    date: Union[str, date, None] = field(default_factory=date.today)


@dataclass
class GoalForm:
    name: str = ""
    target: Union[str, int, float, Decimal, None] = ""
    category: str = ""
    deadline: Union[str, date, None] = ""


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: Decimal


@dataclass(frozen=True)
class MonthlyBucket:
    month_key: str       # "YYYY-MM"
    label: str
    income: Decimal
    expenses: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    progress_pct: Decimal
    is_completed: bool
    remaining: Decimal
    days_remaining: Optional[int]   # None means no deadline
    is_overdue: bool


@dataclass(frozen=True)
class DashboardSummary:
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    balance_pct: Decimal
    by_category: Tuple[CategoryTotal, ...]
    monthly: Tuple[MonthlyBucket, ...]
    goals: Tuple[GoalProgress, ...]
    recent: Tuple[Transaction, ...]
    counts: Tuple[Tuple[str, int], ...]
