"""
Phase classification for the MSP maturity roadmap.

The revenue band and the number of missing core systems (red flags) decide the
phase and the reading range. Rules are evaluated top-down and the first match
wins; a band no rule recognizes yields an explicit unclassified result.
"""

import logging
from typing import List, Optional, Tuple, Callable, NamedTuple

from core.config import (
    RevenueBand,
    RiskLevel,
    SYSTEM_FLAGS,
    HIGH_RISK_RED_FLAGS,
    MEDIUM_RISK_RED_FLAGS,
    PHASE_ESCALATION_RED_FLAGS,
    PHASE_PAGES
)
from models.assessment import (
    AssessmentResult,
    SystemsChecklist,
    STATUS_CLASSIFIED,
    STATUS_UNCLASSIFIED
)

logger = logging.getLogger(__name__)


class PhaseOutcome(NamedTuple):
    phase: int
    page_range: str


def _outcome(phase: int) -> PhaseOutcome:
    return PhaseOutcome(phase, PHASE_PAGES[phase])


def _band_is(band: RevenueBand, min_red_flags: int = 0) -> Callable[[str, int], bool]:
    return lambda revenue_band, red_flags: revenue_band == band.value and red_flags >= min_red_flags


PHASE_RULES: List[Tuple[Callable[[str, int], bool], PhaseOutcome]] = [
    (_band_is(RevenueBand.UNDER_1M), _outcome(1)),
    (_band_is(RevenueBand.FROM_1M_TO_3M), _outcome(2)),
    (_band_is(RevenueBand.FROM_3M_TO_5M), _outcome(3)),
    # A plateaued business with system gaps is in recovery; a healthy one stays in Phase 3
    (_band_is(RevenueBand.PLATEAU_5M, PHASE_ESCALATION_RED_FLAGS), _outcome(4)),
    (_band_is(RevenueBand.PLATEAU_5M), _outcome(3)),
    (_band_is(RevenueBand.FROM_5M_TO_10M, PHASE_ESCALATION_RED_FLAGS), _outcome(4)),
    (_band_is(RevenueBand.FROM_5M_TO_10M), _outcome(5)),
]

PHASE_RECOMMENDATIONS = {
    1: [
        "Define your service offerings with clear scope and pricing",
        "Document SOPs for top 10 ticket types",
        "Implement basic time tracking and billing",
        "Calculate your current CAC and benchmark against industry",
    ],
    2: [
        "Define your Ideal Customer Profile (ICP)",
        "Productize your services into packages",
        "Implement CRM with sales pipeline",
        "Start quarterly TBRs with key clients",
    ],
    3: [
        "Hire operations and finance roles",
        "Implement AR automation",
        "Build financial dashboard with GM by service",
        "Standardize and automate processes",
    ],
    4: [
        "Conduct immediate billing audit and price increases",
        "Implement weekly cash meetings",
        "Enforce ICP and exit non-ideal clients",
        "Build AM pipeline for expansion",
    ],
    5: [
        "Set BHAG and Financial Freedom Number",
        "Align compensation to margin and growth",
        "Implement quarterly board-style reviews",
        "Ensure no client >10% of revenue",
    ],
}

SYSTEM_RECOMMENDATIONS = {name: recommendation for name, _, recommendation in SYSTEM_FLAGS}


def match_phase(revenue_band: str, red_flags: int) -> Optional[PhaseOutcome]:
    for predicate, outcome in PHASE_RULES:
        if predicate(revenue_band, red_flags):
            return outcome
    return None


def risk_level(red_flags: int) -> RiskLevel:
    if red_flags >= HIGH_RISK_RED_FLAGS:
        return RiskLevel.HIGH
    if red_flags == MEDIUM_RISK_RED_FLAGS:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def build_recommendations(phase: Optional[int], systems: SystemsChecklist) -> List[str]:
    recommendations = list(PHASE_RECOMMENDATIONS.get(phase, []))
    recommendations.extend(SYSTEM_RECOMMENDATIONS[name] for name in systems.missing())
    return recommendations


def classify(
    revenue_band: str,
    systems: SystemsChecklist,
    client_count: int = 0,
    avg_mrr: int = 0
) -> AssessmentResult:
    """Classify a business into a roadmap phase.

    ``client_count`` and ``avg_mrr`` are carried through to the result
    unchanged. An unrecognized ``revenue_band`` does not raise: the result has
    status "unclassified", no phase or page range, and an error message.
    """
    if isinstance(revenue_band, RevenueBand):
        revenue_band = revenue_band.value
    red_flags = systems.red_flag_count
    outcome = match_phase(revenue_band, red_flags)

    if outcome is None:
        logger.warning(f"Unrecognized revenue band {revenue_band!r}; assessment left unclassified")
        phase, page_range = None, None
        status = STATUS_UNCLASSIFIED
        error = f"Unrecognized revenue band {revenue_band!r}; expected one of {RevenueBand.values()}"
    else:
        phase, page_range = outcome
        status = STATUS_CLASSIFIED
        error = None

    return AssessmentResult(
        revenue_band=revenue_band,
        client_count=client_count,
        avg_mrr=avg_mrr,
        phase=phase,
        page_range=page_range,
        risk_level=risk_level(red_flags),
        red_flags=red_flags,
        systems=systems,
        recommendations=build_recommendations(phase, systems),
        status=status,
        error=error
    )
