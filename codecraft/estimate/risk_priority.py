"""
Risk Priority Index (RPI), used for ranking risks and for the probability/impact matrix.

    rpi = probability * impact * max(0.5, min(1, risk_minutes / 480))

Probability and impact are Low=1, Medium=2, High=3. The time urgency factor
normalizes the risk's time against one workday, with a floor of 0.5 so that
short risks still count.

Bands: rpi >= 6 Critical, >= 4 High, >= 2 Medium, otherwise Low.

PROMPT> python -m codecraft.estimate.risk_priority
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional
from codecraft.estimate.decimal_util import ZERO, non_negative_or_zero
from codecraft.estimate.time_units import MINUTES_PER_WORKDAY
from codecraft.model.project_model import Risk, RiskLevel

RISK_LEVEL_WEIGHT: dict[RiskLevel, int] = {
    RiskLevel.low: 1,
    RiskLevel.medium: 2,
    RiskLevel.high: 3,
}

URGENCY_REFERENCE_MINUTES = Decimal(MINUTES_PER_WORKDAY)
MIN_URGENCY_FACTOR = Decimal("0.5")
ONE = Decimal(1)

class RiskPriorityBand(str, Enum):
    critical = 'Critical'
    high = 'High'
    medium = 'Medium'
    low = 'Low'

def risk_level_to_number(level: RiskLevel) -> int:
    return RISK_LEVEL_WEIGHT[RiskLevel(level)]

def time_urgency_factor(risk_time_in_minutes: Any) -> Decimal:
    minutes = non_negative_or_zero(risk_time_in_minutes)
    return min(ONE, minutes / URGENCY_REFERENCE_MINUTES)

def risk_priority_index(risk: Risk) -> Decimal:
    probability = risk_level_to_number(risk.probability)
    impact = risk_level_to_number(risk.impact_severity)
    urgency = max(MIN_URGENCY_FACTOR, time_urgency_factor(risk.risk_time_in_minutes))
    return probability * impact * urgency

def classify_rpi(rpi: Decimal) -> RiskPriorityBand:
    if rpi >= 6:
        return RiskPriorityBand.critical
    if rpi >= 4:
        return RiskPriorityBand.high
    if rpi >= 2:
        return RiskPriorityBand.medium
    return RiskPriorityBand.low

@dataclass(frozen=True)
class RiskAssessment:
    risk_id: str
    description: str
    rpi: Decimal
    band: RiskPriorityBand

    def to_dict(self) -> dict:
        return {
            "riskId": self.risk_id,
            "description": self.description,
            "rpi": str(self.rpi),
            "band": self.band.value,
        }

def assess_risk(risk: Risk) -> RiskAssessment:
    rpi = risk_priority_index(risk)
    return RiskAssessment(risk_id=risk.id, description=risk.description, rpi=rpi, band=classify_rpi(rpi))

def rank_risks(risks: Iterable[Risk]) -> list[RiskAssessment]:
    """Highest RPI first. Risks with equal RPI keep their input order."""
    assessments = [assess_risk(risk) for risk in risks]
    return sorted(assessments, key=lambda a: a.rpi, reverse=True)

# ────────────────────────────────────────────────────────────────────────────────
#  Probability x impact matrix
# ----------------------------------------------------------------------------
@dataclass
class RiskMatrixCell:
    probability: RiskLevel
    impact_severity: RiskLevel
    risk_ids: list[str] = field(default_factory=list)
    rpi_sum: Decimal = field(default=ZERO)

    @property
    def count(self) -> int:
        return len(self.risk_ids)

    @property
    def average_rpi(self) -> Optional[Decimal]:
        if not self.risk_ids:
            return None
        return self.rpi_sum / len(self.risk_ids)

    @property
    def band(self) -> Optional[RiskPriorityBand]:
        average = self.average_rpi
        if average is None:
            return None
        return classify_rpi(average)

    def to_dict(self) -> dict:
        average = self.average_rpi
        band = self.band
        return {
            "probability": self.probability.value,
            "impactSeverity": self.impact_severity.value,
            "riskIds": list(self.risk_ids),
            "count": self.count,
            "averageRpi": None if average is None else str(average),
            "band": None if band is None else band.value,
        }

@dataclass
class RiskMatrix:
    cells: dict[tuple[RiskLevel, RiskLevel], RiskMatrixCell]

    def cell(self, probability: RiskLevel, impact_severity: RiskLevel) -> RiskMatrixCell:
        return self.cells[(RiskLevel(probability), RiskLevel(impact_severity))]

    def rows(self) -> list[list[RiskMatrixCell]]:
        """Rows from high probability to low, columns from low impact to high."""
        levels = [RiskLevel.low, RiskLevel.medium, RiskLevel.high]
        return [[self.cells[(p, i)] for i in levels] for p in reversed(levels)]

    def to_dict(self) -> dict:
        return {"rows": [[cell.to_dict() for cell in row] for row in self.rows()]}

def build_risk_matrix(risks: Iterable[Risk]) -> RiskMatrix:
    cells: dict[tuple[RiskLevel, RiskLevel], RiskMatrixCell] = {}
    for probability in RiskLevel:
        for impact in RiskLevel:
            cells[(probability, impact)] = RiskMatrixCell(probability=probability, impact_severity=impact)

    for risk in risks:
        cell = cells[(risk.probability, risk.impact_severity)]
        cell.risk_ids.append(risk.id)
        cell.rpi_sum += risk_priority_index(risk)
    return RiskMatrix(cells=cells)

if __name__ == "__main__":
    from codecraft.estimate.time_units import TimeUnit
    risks = [
        Risk(description="Key developer leaves", time_estimate=600, time_unit=TimeUnit.minutes, probability=RiskLevel.high, impact_severity=RiskLevel.high),
        Risk(description="Late design feedback", time_estimate=1, time_unit=TimeUnit.hours, probability=RiskLevel.medium, impact_severity=RiskLevel.low),
    ]
    for assessment in rank_risks(risks):
        print(assessment)
    for row in build_risk_matrix(risks).rows():
        print([f"{cell.count}:{cell.band.value if cell.band else '-'}" for cell in row])
