import os
from dotenv import load_dotenv
from enum import Enum

from .exceptions import InputValidationError

# Load environment variables
load_dotenv()

# Storage Configuration
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory").lower()
MONGO_URI = os.getenv("MONGO_URI")
DB_NAME = os.getenv("DB_NAME", "msp_roadmap")
STATE_COLLECTION = os.getenv("STATE_COLLECTION", "roadmap_state")

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Revenue Band Definitions
class RevenueBand(Enum):
    UNDER_1M = "<1M"
    FROM_1M_TO_3M = "1–3M"
    FROM_3M_TO_5M = "3–5M"
    PLATEAU_5M = "~5M plateau"
    FROM_5M_TO_10M = "5–10M"

    @classmethod
    def values(cls):
        return [band.value for band in cls]

    @classmethod
    def parse(cls, value):
        """Strict lookup of a band by its display value."""
        try:
            return cls(value)
        except ValueError:
            raise InputValidationError(
                f"Unrecognized revenue band {value!r}; expected one of {cls.values()}"
            ) from None

# Risk Levels
class RiskLevel(Enum):
    HIGH = "High Risk"
    MEDIUM = "Medium Risk"
    LOW = "Low Risk"

    @property
    def label(self):
        return self.value

    @property
    def description(self):
        return RISK_DESCRIPTIONS[self]

RISK_DESCRIPTIONS = {
    RiskLevel.HIGH: "Multiple system gaps detected - immediate attention needed",
    RiskLevel.MEDIUM: "Some system gaps identified - prioritize improvements",
    RiskLevel.LOW: "Good system foundation - focus on optimization",
}

# Red flag thresholds
HIGH_RISK_RED_FLAGS = 3
MEDIUM_RISK_RED_FLAGS = 2
PHASE_ESCALATION_RED_FLAGS = 2

# Core operational systems, in flag order, with the corrective recommendation
# added when the system is missing
SYSTEM_FLAGS = [
    ("psa", "PSA in place", "Implement PSA system immediately"),
    ("sops", "SOPs documented", "Document core operational procedures"),
    ("ar_automation", "AR automation live", "Set up automated billing and collections"),
    ("am_tbr", "AM/TBR cadence", "Establish quarterly business reviews"),
    ("finance_controller", "Finance controller in seat", "Hire finance controller or outsource"),
]

PHASE_COUNT = 5

# Playbook reading range per phase
PHASE_PAGES = {
    1: "5-6",
    2: "7-8",
    3: "9-10",
    4: "11-13",
    5: "14-15",
}

UNCLASSIFIED_LABEL = "Review inputs"

# Metric Configuration
DEFAULT_AVAILABLE_HOURS = 40.0

# Qualitative bands per metric. "lower_is_better" flips the comparison (DSO).
METRIC_THRESHOLDS = {
    "service_gm_pct": {"good": 65.0, "warn": 60.0, "lower_is_better": False},
    "ltv_cac_ratio": {"good": 3.0, "warn": 2.5, "lower_is_better": False},
    "dso": {"good": 35.0, "warn": 45.0, "lower_is_better": True},
    "utilization_pct": {"good": 70.0, "warn": 65.0, "lower_is_better": False},
}

RATING_GOOD = "good"
RATING_WARN = "warn"
RATING_RISK = "risk"

# Storage keys
ASSESSMENT_KEY = "assessmentData"
METRICS_KEY = "metricsData"
PHASE_PROGRESS_KEY = "phase{phase}Progress"
PHASE_ITEM_KEY = "phase{phase}_{item_id}"
