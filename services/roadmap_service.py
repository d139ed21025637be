import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from core.config import ASSESSMENT_KEY, METRICS_KEY
from core.repository import StateRepository
from models.assessment import AssessmentResult, SystemsChecklist
from models.checklist import ChecklistProgress
from models.metrics import MetricInputs, MetricsSnapshot
from services.checklist_service import ChecklistTracker
from services.metrics_service import build_snapshot
from services.phase_service import classify
from utils.data_processing import safe_int
from utils.validation import validate_record

logger = logging.getLogger(__name__)

ASSESSMENT_SCHEMA = {"revenue_band": str, "risk": str, "red_flags": (int, float), "systems": dict}
METRICS_SCHEMA = {"inputs": dict, "results": dict}


@dataclass
class SavedState:
    assessment: Optional[AssessmentResult] = None
    metrics: Optional[MetricsSnapshot] = None
    checklists: Dict[int, ChecklistProgress] = field(default_factory=dict)


class RoadmapService:
    """Host-facing entry point: parses raw form values, runs the engines and
    persists each result through the repository."""

    def __init__(self, repository: StateRepository):
        self.repository = repository
        self.checklists = ChecklistTracker(repository)

    def load_assessment(self) -> Optional[AssessmentResult]:
        record = self.repository.load(ASSESSMENT_KEY)
        if record is None:
            return None
        if not validate_record(record, ASSESSMENT_SCHEMA):
            logger.warning("Stored assessment has missing or mistyped fields; ignoring it")
            return None
        try:
            return AssessmentResult.from_dict(record)
        except (AttributeError, KeyError, ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Stored assessment could not be read: {e}")
            return None

    def load_metrics(self) -> Optional[MetricsSnapshot]:
        record = self.repository.load(METRICS_KEY)
        if record is None:
            return None
        if not validate_record(record, METRICS_SCHEMA):
            logger.warning("Stored metrics have missing or mistyped fields; ignoring them")
            return None
        try:
            return MetricsSnapshot.from_dict(record)
        except (AttributeError, ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Stored metrics could not be read: {e}")
            return None

    def load_saved_data(self) -> SavedState:
        return SavedState(
            assessment=self.load_assessment(),
            metrics=self.load_metrics(),
            checklists=self.checklists.get_all_progress()
        )

    def submit_assessment(self, form: Mapping[str, Any]) -> AssessmentResult:
        result = classify(
            revenue_band=form.get("revenueBand", form.get("revenue_band")),
            systems=SystemsChecklist.from_form(form),
            client_count=safe_int(form.get("clientCount", form.get("client_count"))),
            avg_mrr=safe_int(form.get("avgMRR", form.get("avg_mrr")))
        )
        self.repository.save(ASSESSMENT_KEY, result.to_dict())
        logger.info(f"Assessment saved: {result.phase_label}, {result.risk_label}, {result.red_flags} red flags")
        return result

    def update_metrics(self, raw: Mapping[str, Any]) -> MetricsSnapshot:
        snapshot = build_snapshot(MetricInputs.from_form(raw))
        self.repository.save(METRICS_KEY, snapshot.to_dict())
        return snapshot
