import logging
from typing import Dict, List

from core.config import PHASE_PROGRESS_KEY, PHASE_ITEM_KEY
from core.exceptions import CatalogMismatchError
from core.repository import StateRepository
from models.checklist import ChecklistItem, ChecklistProgress

logger = logging.getLogger(__name__)

CHECKLIST_CATALOG: Dict[int, List[ChecklistItem]] = {
    1: [
        ChecklistItem("services", "Define services with scope, exclusions, SLAs, pricing, profit per service"),
        ChecklistItem("sops", "Document SOPs for top 10 tickets and onboarding"),
        ChecklistItem("profit", "Track profit per client and reprice/exit low-margin accounts"),
        ChecklistItem("cac", "Calculate CAC and benchmark vs industry standards"),
        ChecklistItem("stack", "Build technology stack on value lenses"),
        ChecklistItem("ar", "Implement basic AR workflow and payment terms"),
        ChecklistItem("psa", "Deploy PSA lite or CRM system"),
        ChecklistItem("tracking", "Set up time tracking for all billable activities"),
    ],
    2: [
        ChecklistItem("icp", "Define ICP with seats, industries, compliance, budget, tech profile"),
        ChecklistItem("packages", "Productize services into Good/Better/Best packages"),
        ChecklistItem("pricing", "Set tiered pricing, SLAs, minimums, and rate cards"),
        ChecklistItem("crm", "Implement CRM with sales pipeline and exit criteria"),
        ChecklistItem("proposals", "Create proposal templates and MSAs"),
        ChecklistItem("followup", "Set up automated follow-up sequences"),
        ChecklistItem("tbr", "Launch quarterly TBRs for every MRR client"),
        ChecklistItem("amrole", "Define account manager role and responsibilities"),
        ChecklistItem("pruning", "Audit and prune non-ICP clients"),
        ChecklistItem("leadership", "Establish weekly ops, monthly metrics, quarterly planning"),
    ],
    3: [
        ChecklistItem("orgchart", "Create org chart and role scorecards for key positions"),
        ChecklistItem("psa", "Full PSA adoption with >95% time tracking compliance"),
        ChecklistItem("arauto", "Implement AR automation and payments on file system"),
        ChecklistItem("dashboard", "Build financial dashboard with weekly GM by service"),
        ChecklistItem("playbooks", "Create standardization playbooks for all processes"),
        ChecklistItem("automations", "Deploy automations for provisioning, licensing, monitoring"),
        ChecklistItem("dataflows", "Map and optimize all data flows between systems"),
        ChecklistItem("capacity", "Define utilization targets and capacity planning process"),
        ChecklistItem("qbr", "Build QBR engine with project forecasting capabilities"),
        ChecklistItem("integration", "Create unified customer view across all platforms"),
    ],
    4: [
        ChecklistItem("billing_audit", "Conduct emergency billing audit and identify issues"),
        ChecklistItem("price_increases", "Issue price increases for underpriced services"),
        ChecklistItem("ar_live", "Get AR automation system live immediately"),
        ChecklistItem("payment_terms", "Tighten payment terms and policies"),
        ChecklistItem("headcount_plan", "Create headcount plan tied to pipeline and utilization"),
        ChecklistItem("freeze_hires", "Freeze non-critical hiring until stabilized"),
        ChecklistItem("quality_gates", "Implement quality gates and problem management"),
        ChecklistItem("post_incident", "Establish post-incident review process"),
        ChecklistItem("icp_enforcement", "Strictly enforce ICP and exit non-ideal clients"),
        ChecklistItem("weekly_cash", "Start weekly cash flow and margin tracking meetings"),
        ChecklistItem("am_pipeline", "Build AM pipeline >20% of MRR"),
        ChecklistItem("project_recovery", "Recover delayed or over-budget projects"),
    ],
    5: [
        ChecklistItem("bhag", "Set BHAG and Financial Freedom Number"),
        ChecklistItem("backward", "Create backward plan to exit metrics"),
        ChecklistItem("targets", "Define quarterly targets and milestones"),
        ChecklistItem("compensation", "Align compensation to margin and growth metrics"),
        ChecklistItem("churn_analysis", "Implement quarterly churn analysis and save plays"),
        ChecklistItem("client_concentration", "Ensure no client >10% of revenue"),
        ChecklistItem("board_reviews", "Establish quarterly board-style reviews"),
        ChecklistItem("documentation", "Document all processes for handover"),
        ChecklistItem("management_team", "Build management team that can run without you"),
        ChecklistItem("exit_prep", "Prepare financial and legal documentation"),
    ],
}


def get_checklist_items(phase: int) -> List[ChecklistItem]:
    return list(CHECKLIST_CATALOG.get(phase, []))


class ChecklistTracker:
    """Per-phase checklist completion backed by the state repository.

    Completion is informational only; it never moves the business to another
    phase.
    """

    def __init__(self, repository: StateRepository):
        self.repository = repository

    def _item_key(self, phase: int, item_id: str) -> str:
        return PHASE_ITEM_KEY.format(phase=phase, item_id=item_id)

    def _require_item(self, phase: int, item_id: str) -> None:
        item_ids = {item.id for item in CHECKLIST_CATALOG.get(phase, [])}
        if item_id not in item_ids:
            logger.error(f"Rejected toggle of unknown checklist item {item_id!r} for phase {phase}")
            raise CatalogMismatchError(phase, item_id)

    def is_completed(self, phase: int, item_id: str) -> bool:
        self._require_item(phase, item_id)
        return self.repository.load_flag(self._item_key(phase, item_id))

    def toggle_item(self, phase: int, item_id: str) -> ChecklistProgress:
        self._require_item(phase, item_id)
        key = self._item_key(phase, item_id)
        completed = not self.repository.load_flag(key)
        self.repository.save_flag(key, completed)
        logger.debug(f"Phase {phase} item {item_id} marked {'done' if completed else 'open'}")
        return self._save_progress(phase)

    def get_progress(self, phase: int) -> ChecklistProgress:
        catalog = CHECKLIST_CATALOG.get(phase, [])
        items = {item.id: self.repository.load_flag(self._item_key(phase, item.id)) for item in catalog}
        return ChecklistProgress(phase=phase, items=items, total=len(catalog))

    def get_all_progress(self) -> Dict[int, ChecklistProgress]:
        return {phase: self.get_progress(phase) for phase in CHECKLIST_CATALOG}

    def reset(self, phase: int) -> ChecklistProgress:
        for item in CHECKLIST_CATALOG.get(phase, []):
            self.repository.delete(self._item_key(phase, item.id))
        return self._save_progress(phase)

    def _save_progress(self, phase: int) -> ChecklistProgress:
        progress = self.get_progress(phase)
        self.repository.save(PHASE_PROGRESS_KEY.format(phase=phase), progress.to_dict())
        return progress
