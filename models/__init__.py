"""
Models package for the MSP revenue roadmap.
Contains the value objects passed between the host and the engines.
"""

from .metrics import MetricInputs, MetricResults, MetricsSnapshot
from .assessment import SystemsChecklist, AssessmentResult
from .checklist import ChecklistItem, ChecklistProgress
from .planning import (
    BackwardPlanInputs,
    BackwardPlan,
    CashForecastInputs,
    CashForecastMonth,
    CashForecast
)

__all__ = [
    'MetricInputs',
    'MetricResults',
    'MetricsSnapshot',
    'SystemsChecklist',
    'AssessmentResult',
    'ChecklistItem',
    'ChecklistProgress',
    'BackwardPlanInputs',
    'BackwardPlan',
    'CashForecastInputs',
    'CashForecastMonth',
    'CashForecast'
]
