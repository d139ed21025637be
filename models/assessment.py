import math
from typing import List, Dict, Any, Optional, Mapping
from dataclasses import dataclass, field, fields

from core.config import RiskLevel, SYSTEM_FLAGS, PHASE_PAGES, UNCLASSIFIED_LABEL
from utils.data_processing import is_checked

STATUS_CLASSIFIED = "classified"
STATUS_UNCLASSIFIED = "unclassified"


def _stored_int(value: Any, name: str) -> int:
    """Whole number from a stored record; rejects bools, non-finite and fractional values."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} is not a number: {value!r}")
    if value != int(value):
        raise ValueError(f"{name} is not a whole number: {value!r}")
    return int(value)

# Host checkbox names -> SystemsChecklist attribute
SYSTEM_FORM_FIELDS = {
    "psa": "psa",
    "sops": "sops",
    "arAuto": "ar_automation",
    "amTbr": "am_tbr",
    "finance": "finance_controller",
}

@dataclass(frozen=True)
class SystemsChecklist:
    """The five core operational systems; a missing system is a red flag."""
    psa: bool = False
    sops: bool = False
    ar_automation: bool = False
    am_tbr: bool = False
    finance_controller: bool = False

    @property
    def red_flag_count(self) -> int:
        return len(self.missing())

    def missing(self) -> List[str]:
        """Names of absent systems, in flag order."""
        return [name for name, _, _ in SYSTEM_FLAGS if not getattr(self, name)]

    def to_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SystemsChecklist':
        return cls(**{f.name: data.get(f.name) is True for f in fields(cls)})

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> 'SystemsChecklist':
        return cls(**{
            attr: is_checked(data.get(form_id, data.get(attr, False)))
            for form_id, attr in SYSTEM_FORM_FIELDS.items()
        })

@dataclass
class AssessmentResult:
    """Outcome of one phase assessment submission."""
    revenue_band: str
    client_count: int
    avg_mrr: int
    phase: Optional[int]
    page_range: Optional[str]
    risk_level: RiskLevel
    red_flags: int
    systems: SystemsChecklist
    recommendations: List[str] = field(default_factory=list)
    status: str = STATUS_CLASSIFIED
    error: Optional[str] = None

    @property
    def is_classified(self) -> bool:
        return self.status == STATUS_CLASSIFIED

    @property
    def phase_label(self) -> str:
        return f"Phase {self.phase}" if self.phase else UNCLASSIFIED_LABEL

    @property
    def risk_label(self) -> str:
        return self.risk_level.label

    @property
    def risk_description(self) -> str:
        return self.risk_level.description

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue_band": self.revenue_band,
            "client_count": self.client_count,
            "avg_mrr": self.avg_mrr,
            "phase": self.phase,
            "page_range": self.page_range,
            "risk": self.risk_level.value,
            "red_flags": self.red_flags,
            "systems": self.systems.to_dict(),
            "recommendations": list(self.recommendations),
            "status": self.status,
            "error": self.error
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AssessmentResult':
        """Rebuild a stored result; raises ValueError when a field is out of range."""
        phase = data.get("phase")
        page_range = data.get("page_range")
        status = data.get("status", STATUS_CLASSIFIED)
        red_flags = _stored_int(data["red_flags"], "red_flags")

        if status not in (STATUS_CLASSIFIED, STATUS_UNCLASSIFIED):
            raise ValueError(f"unknown status {status!r}")
        if phase is None:
            if status == STATUS_CLASSIFIED or page_range is not None:
                raise ValueError("classified result without a phase")
        else:
            phase = _stored_int(phase, "phase")
            if phase not in PHASE_PAGES or PHASE_PAGES[phase] != page_range:
                raise ValueError(f"phase {phase} does not match page range {page_range!r}")
        if not 0 <= red_flags <= len(SYSTEM_FLAGS):
            raise ValueError(f"red_flags out of range: {red_flags}")

        return cls(
            revenue_band=data["revenue_band"],
            client_count=_stored_int(data.get("client_count") or 0, "client_count"),
            avg_mrr=_stored_int(data.get("avg_mrr") or 0, "avg_mrr"),
            phase=phase,
            page_range=page_range,
            risk_level=RiskLevel(data["risk"]),
            red_flags=red_flags,
            systems=SystemsChecklist.from_dict(data.get("systems") or {}),
            recommendations=list(data.get("recommendations") or []),
            status=status,
            error=data.get("error")
        )

    def get_summary(self) -> Dict[str, Any]:
        """Display strings the host renders."""
        return {
            "phase": self.phase_label,
            "page_range": self.page_range or "",
            "risk": self.risk_label,
            "risk_description": self.risk_description,
            "red_flags": self.red_flags,
            "recommendations": self.recommendations
        }
