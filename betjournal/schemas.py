"""
Pydantic schemas for every document the journal persists.

Using explicit schemas instead of raw dicts gives entry-time validation for
the dashboard forms and a single place where stored JSON is parsed back into
typed objects.  The engines never validate; they trust these models.
"""

from __future__ import annotations

import uuid
import datetime as dt
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from betjournal.core.settlement import BetResult

__all__ = [
    "BetResult",
    "ConfidenceLevel",
    "Bet",
    "LadderStep",
    "CycleHistoryItem",
    "CycleState",
    "AssetConfig",
    "AllocationPolicy",
    "AllocationSettings",
    "AllocationState",
    "PredictionResult",
    "MarketOdds",
]


class ConfidenceLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# ---------------------------------------------------------------------------
# Bet journal
# ---------------------------------------------------------------------------

def _new_id() -> str:
    return str(uuid.uuid4())


class Bet(BaseModel):
    """
    A single journal entry.

    Records are replaced wholesale under the same ``id`` when edited; there
    is no partial patching.
    """

    id: str = Field(default_factory=_new_id)
    date: dt.date = Field(default_factory=dt.date.today)
    sport: str = Field("Football", max_length=60)
    league: str = Field("", max_length=120)
    match: str = Field("", max_length=200, description='e.g. "Arsenal vs Chelsea"')
    selection: str = Field("", max_length=200, description='e.g. "Home -0.5"')
    odds: float = Field(2.0, gt=1.0, description="Decimal odds")
    stake: float = Field(100.0, gt=0)
    result: BetResult = BetResult.PENDING
    bookmaker: str = Field("", max_length=120)
    confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM
    market_type: Optional[str] = Field("Match Winner", max_length=80)
    emotional_state: Optional[str] = Field("Calm", max_length=40)
    notes: Optional[str] = Field(None, max_length=2000)
    closing_line: Optional[float] = Field(None, gt=1.0)
    expected_value: Optional[float] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        return v or _new_id()

    model_config = {
        "json_schema_extra": {
            "example": {
                "date": "2025-03-01",
                "sport": "Football",
                "league": "Premier League",
                "match": "Arsenal vs Chelsea",
                "selection": "Arsenal DNB",
                "odds": 1.85,
                "stake": 100.0,
                "result": "WIN",
                "bookmaker": "Pinnacle",
                "confidence": "High",
                "market_type": "Draw No Bet",
                "emotional_state": "Calm",
            }
        },
    }


# ---------------------------------------------------------------------------
# Cycle / ladder
# ---------------------------------------------------------------------------

StepStatus = Literal["PENDING", "WIN", "LOSS", "SKIPPED"]
CycleStatus = Literal["IDLE", "ACTIVE", "COMPLETED", "FAILED"]


class LadderStep(BaseModel):
    step: int = Field(..., ge=1)
    stake: float
    target: float
    status: StepStatus = "PENDING"


class CycleHistoryItem(BaseModel):
    """Terminal record of one ladder run.  Never edited once written."""

    id: str = Field(default_factory=_new_id)
    date: dt.date = Field(default_factory=dt.date.today)
    start_capital: float
    end_bankroll: float
    profit: float
    status: Literal["COMPLETED", "FAILED"]
    steps_completed: int = Field(..., ge=0)
    total_steps: int = Field(..., ge=1)

    model_config = {"frozen": True}


class CycleState(BaseModel):
    start_capital: float = Field(100_000.0, gt=0)
    steps: int = Field(5, ge=1, le=30)
    base_odds: float = Field(2.0, gt=1.0)
    current_step: int = Field(1, ge=1)
    cycle_bankroll: float = 100_000.0
    cycle_status: CycleStatus = "IDLE"
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    ladder: List[LadderStep] = Field(default_factory=list)
    history: List[CycleHistoryItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_ladder_consistent(self) -> "CycleState":
        # An empty ladder is allowed while IDLE; start_cycle projects one.
        if self.ladder and len(self.ladder) != self.steps:
            raise ValueError(f"ladder has {len(self.ladder)} steps, expected {self.steps}")
        if self.current_step > self.steps:
            raise ValueError(f"current_step {self.current_step} is past the last step {self.steps}")
        if self.cycle_status == "ACTIVE" and not self.ladder:
            raise ValueError("an ACTIVE cycle needs a ladder")
        return self


# ---------------------------------------------------------------------------
# Capital allocation
# ---------------------------------------------------------------------------

class AssetConfig(BaseModel):
    crypto: float = 0.0
    real_estate: float = 12_000.0
    cash: float = -600.0
    other: float = 0.0


class AllocationPolicy(BaseModel):
    """Percent of betting profit routed to each bucket; should sum to 100."""

    betting_split: float = Field(50.0, ge=0, le=100)
    crypto_split: float = Field(30.0, ge=0, le=100)
    cash_split: float = Field(15.0, ge=0, le=100)
    emergency_split: float = Field(5.0, ge=0, le=100)


class AllocationSettings(BaseModel):
    target_goal: float = Field(100_000.0, ge=0)
    start_net_worth: float = 10_000.0
    exchange_rate: float = Field(1_000.0, ge=0, description="Local currency per USD")
    auto_reinvest: bool = True
    reinvest_threshold: float = Field(1_000.0, ge=0)
    frequency: Literal["Daily", "Weekly", "Monthly"] = "Weekly"


class AllocationState(BaseModel):
    assets: AssetConfig = Field(default_factory=AssetConfig)
    policy: AllocationPolicy = Field(default_factory=AllocationPolicy)
    settings: AllocationSettings = Field(default_factory=AllocationSettings)
    monthly_schedule: Dict[str, List[float]] = Field(default_factory=dict)

    @field_validator("monthly_schedule", mode="before")
    @classmethod
    def migrate_flat_schedule(cls, v):
        # Early versions stored a single 12-month list with no year key.
        if v is None:
            return {}
        if isinstance(v, list):
            return {str(dt.date.today().year): v}
        return v

    @field_validator("monthly_schedule")
    @classmethod
    def pad_months(cls, v: Dict[str, List[float]]) -> Dict[str, List[float]]:
        return {year: (list(months) + [0.0] * 12)[:12] for year, months in v.items()}


# ---------------------------------------------------------------------------
# Prediction service
# ---------------------------------------------------------------------------

class PredictionResult(BaseModel):
    """Probability estimate for a live football match (all probs in [0, 1])."""

    home_win: float = Field(..., ge=0.0, le=1.0)
    draw: float = Field(..., ge=0.0, le=1.0)
    away_win: float = Field(..., ge=0.0, le=1.0)
    double_chance_1x: float = Field(..., ge=0.0, le=1.0)
    double_chance_x2: float = Field(..., ge=0.0, le=1.0)
    over_05: float = Field(..., ge=0.0, le=1.0)
    over_15: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""
    confidence: float = Field(..., ge=0.0, le=100.0)
    is_fallback: bool = False


class MarketOdds(BaseModel):
    """Decimal odds the user can get for the three live markets."""

    double_chance: float = Field(1.40, gt=1.0)
    over_05: float = Field(1.10, gt=1.0)
    over_15: float = Field(1.50, gt=1.0)
