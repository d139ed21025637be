from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field, asdict
from datetime import date

@dataclass
class BackwardPlanInputs:
    """Exit target and current run-rate used to plan backwards."""
    target_arr: float
    target_date: date
    current_arr: float
    current_mrr: float
    arpa: float
    revenue_churn_rate: float = 0.0
    am_expansion_rate: float = 0.0
    win_rate: float = 0.0

@dataclass
class BackwardPlan:
    months_to_target: int
    required_arr_delta: float
    required_mrr_delta: float
    projected_expansion_mrr: float
    churned_mrr: float
    net_new_mrr_needed: float
    net_new_clients_needed: float
    pipeline_needed: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class CashForecastInputs:
    starting_cash: float
    starting_ar: float
    current_dso: float
    monthly_recurring_revenue: float
    monthly_project_revenue: float = 0.0
    monthly_cogs: float = 0.0
    monthly_opex: float = 0.0
    one_time_investments: float = 0.0

@dataclass
class CashForecastMonth:
    month: int
    opening_cash: float
    collections_from_ar: float
    current_month_collections: float
    outflows: float
    closing_cash: float
    closing_ar: float

    @property
    def inflows(self) -> float:
        return self.collections_from_ar + self.current_month_collections

@dataclass
class CashForecast:
    months: List[CashForecastMonth] = field(default_factory=list)
    ending_cash: float = 0.0
    ending_ar: float = 0.0
    runway_months: float = 0.0
    lowest_cash: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "months": [asdict(m) for m in self.months],
            "ending_cash": self.ending_cash,
            "ending_ar": self.ending_ar,
            "runway_months": self.runway_months,
            "lowest_cash": self.lowest_cash
        }
