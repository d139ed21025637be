"""
Services package for the MSP revenue roadmap.
Contains the metric engine, phase classifier, checklist tracker and worksheets.
"""

from .metrics_service import compute_metrics, rate_metric, build_snapshot
from .phase_service import classify, risk_level
from .checklist_service import ChecklistTracker, CHECKLIST_CATALOG
from .roadmap_service import RoadmapService

__all__ = [
    'compute_metrics',
    'rate_metric',
    'build_snapshot',
    'classify',
    'risk_level',
    'ChecklistTracker',
    'CHECKLIST_CATALOG',
    'RoadmapService'
]
