from typing import Dict, Any, Mapping
from dataclasses import dataclass, field, fields

from core.config import DEFAULT_AVAILABLE_HOURS
from utils.data_processing import non_negative, safe_float

# Host form field ids -> MetricInputs attribute
FORM_FIELDS = {
    "arr": "arr",
    "mrr": "mrr",
    "mrrClients": "mrr_clients",
    "serviceRevenue": "service_revenue",
    "serviceCogs": "service_cogs",
    "marketingSpend": "marketing_spend",
    "newClients": "new_clients",
    "retentionMonths": "retention_months",
    "arBalance": "ar_balance",
    "revenue90d": "revenue_90d",
    "fteCount": "fte_count",
    "availableHours": "available_hours_per_fte",
    "billableHours": "billable_hours",
}

@dataclass(frozen=True)
class MetricInputs:
    """Raw operating figures entered by the MSP owner."""
    arr: float = 0.0
    mrr: float = 0.0
    mrr_clients: float = 0.0
    service_revenue: float = 0.0
    service_cogs: float = 0.0
    marketing_spend: float = 0.0
    new_clients: float = 0.0
    retention_months: float = 0.0
    ar_balance: float = 0.0
    revenue_90d: float = 0.0
    fte_count: float = 0.0
    available_hours_per_fte: float = 0.0
    billable_hours: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MetricInputs':
        return cls(**{f.name: non_negative(data.get(f.name)) for f in fields(cls)})

    @classmethod
    def from_form(cls, raw: Mapping[str, Any]) -> 'MetricInputs':
        """Build inputs from host field values keyed by form id or attribute name.

        Missing, unparseable and negative values become 0, except the weekly
        available hours per FTE which falls back to the 40 hour default.
        """
        values = {}
        for form_id, attr in FORM_FIELDS.items():
            value = raw.get(form_id, raw.get(attr))
            values[attr] = non_negative(value)
        if not values["available_hours_per_fte"]:
            values["available_hours_per_fte"] = DEFAULT_AVAILABLE_HOURS
        return cls(**values)

@dataclass(frozen=True)
class MetricResults:
    """Derived metrics; recomputed from MetricInputs, never stored on their own."""
    avg_mrr_per_client: float = 0.0
    service_gm_pct: float = 0.0
    cac: float = 0.0
    monthly_gross_margin_per_client: float = 0.0
    ltv: float = 0.0
    ltv_cac_ratio: float = 0.0
    dso: float = 0.0
    staff_to_revenue_ratio: float = 0.0
    utilization_pct: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MetricResults':
        return cls(**{f.name: safe_float(data.get(f.name)) for f in fields(cls)})

@dataclass
class MetricsSnapshot:
    """What the host saves under metricsData: inputs, results and their ratings."""
    inputs: MetricInputs
    results: MetricResults
    ratings: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": self.inputs.to_dict(),
            "results": self.results.to_dict(),
            "ratings": dict(self.ratings)
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MetricsSnapshot':
        return cls(
            inputs=MetricInputs.from_dict(data.get("inputs") or {}),
            results=MetricResults.from_dict(data.get("results") or {}),
            ratings=dict(data.get("ratings") or {})
        )
