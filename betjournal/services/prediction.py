"""
Live-match prediction via the Gemini ``generateContent`` REST endpoint.

The model is asked for structured JSON (probabilities for the match result,
both double-chance sides and over 0.5 / 1.5 goals) and the reply is parsed
into :class:`~betjournal.schemas.PredictionResult`.

Failure policy
--------------
One blocking request with a timeout and no retries.  Any failure (no API
key, network error, non-2xx status, empty or malformed reply, out-of-range
probability) is logged and answered with :data:`FALLBACK_PREDICTION`.  The
caller never sees an exception from :meth:`PredictionClient.analyze_match`.

Market evaluation
-----------------
:func:`evaluate_market` and :func:`evaluate_prediction` combine a prediction
with the odds the user can actually get, through the shared Kelly and EV
engines in :mod:`betjournal.core`.
"""

import json
import logging
import os
from typing import Dict, List, Optional

import requests
from dotenv import load_dotenv
from pydantic import ValidationError

from betjournal.core.expected_value import ev_per_unit, implied_probability
from betjournal.core.kelly import DEFAULT_SAFETY_FRACTION, kelly_stake
from betjournal.schemas import MarketOdds, PredictionResult

load_dotenv()

logger = logging.getLogger(__name__)

API_KEY = os.getenv("GEMINI_API_KEY")
MODEL = os.getenv("GEMINI_MODEL", "gemini-3-pro-preview")
BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
TIMEOUT_SEC = float(os.getenv("PREDICTION_TIMEOUT_SEC", "30"))

FALLBACK_PREDICTION = PredictionResult(
    home_win=0.40,
    draw=0.30,
    away_win=0.30,
    double_chance_1x=0.70,
    double_chance_x2=0.60,
    over_05=0.85,
    over_15=0.55,
    reasoning="Analysis failed. Using statistical averages for live betting markets.",
    confidence=40,
    is_fallback=True,
)

# Reply field → PredictionResult field
_FIELD_MAP = {
    "homeWin": "home_win",
    "draw": "draw",
    "awayWin": "away_win",
    "doubleChance1X": "double_chance_1x",
    "doubleChanceX2": "double_chance_x2",
    "over05": "over_05",
    "over15": "over_15",
    "reasoning": "reasoning",
    "confidence": "confidence",
}

_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "homeWin": {"type": "NUMBER", "description": "Prob of Home Win (0-1)"},
        "draw": {"type": "NUMBER", "description": "Prob of Draw (0-1)"},
        "awayWin": {"type": "NUMBER", "description": "Prob of Away Win (0-1)"},
        "doubleChance1X": {"type": "NUMBER", "description": "Prob of Home Win OR Draw (0-1)"},
        "doubleChanceX2": {"type": "NUMBER", "description": "Prob of Away Win OR Draw (0-1)"},
        "over05": {"type": "NUMBER", "description": "Prob of Over 0.5 Total Goals in match (0-1)"},
        "over15": {"type": "NUMBER", "description": "Prob of Over 1.5 Total Goals in match (0-1)"},
        "reasoning": {
            "type": "STRING",
            "description": "Strategic analysis focusing on second half momentum and goal likelihood.",
        },
        "confidence": {"type": "NUMBER", "description": "Confidence score (0-100)"},
    },
    "required": list(_FIELD_MAP),
}


def build_prompt(
    home_team: str,
    away_team: str,
    league: str,
    current_score: str,
    current_minute: str,
    context: str = "",
) -> str:
    prompt = (
        "Analyze this live football match for a second-half betting strategy.\n"
        f"Match: {home_team} vs {away_team} ({league}).\n"
        f"Current State: Minute {current_minute}, Score {current_score}.\n\n"
        "The user is looking to bet on:\n"
        "1. Winning Team + Draw (Double Chance)\n"
        "2. Over 0.5 Goals (Total)\n"
        "3. Over 1.5 Goals (Total)\n\n"
        "Analyze the game flow, momentum, and likelihood of more goals based on "
        "the current score and time remaining.\n"
        "Provide realistic probabilities for these specific outcomes."
    )
    if context.strip():
        prompt += f"\n\nAdditional context from the user: {context.strip()}"
    return prompt


def parse_prediction(payload: Dict) -> PredictionResult:
    """
    Extract the structured reply from a ``generateContent`` response body.

    Raises:
        KeyError / IndexError: the body has no candidate text.
        ValueError: the text is not JSON.
        ValidationError: a field is missing or out of range.
    """
    text = payload["candidates"][0]["content"]["parts"][0]["text"]
    if not text:
        raise ValueError("Empty reply from prediction service")
    data = json.loads(text)
    return PredictionResult.model_validate(
        {ours: data[theirs] for theirs, ours in _FIELD_MAP.items() if theirs in data}
    )


class PredictionClient:
    """Client for the Gemini prediction model"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = MODEL,
        base_url: str = BASE_URL,
        timeout: float = TIMEOUT_SEC,
    ):
        self.api_key = api_key or API_KEY
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def analyze_match(
        self,
        home_team: str,
        away_team: str,
        league: str,
        current_score: str,
        current_minute: str,
        context: str = "",
    ) -> PredictionResult:
        """Probability estimate for the live match, or the fallback."""
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not set; returning fallback prediction")
            return FALLBACK_PREDICTION

        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": build_prompt(
                home_team, away_team, league, current_score, current_minute, context
            )}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": _RESPONSE_SCHEMA,
            },
        }

        try:
            response = requests.post(
                url,
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = parse_prediction(response.json())
            logger.info(
                "Prediction for %s vs %s: 1X %.2f, X2 %.2f, O0.5 %.2f, O1.5 %.2f (confidence %.0f)",
                home_team, away_team, result.double_chance_1x, result.double_chance_x2,
                result.over_05, result.over_15, result.confidence,
            )
            return result

        except requests.exceptions.RequestException as e:
            logger.error("Prediction API error: %s", e)
        except (KeyError, IndexError, ValueError, ValidationError) as e:
            logger.error("Prediction reply could not be parsed: %s", e)
        return FALLBACK_PREDICTION


# ---------------------------------------------------------------------------
# Market evaluation
# ---------------------------------------------------------------------------

def evaluate_market(
    label: str,
    probability: float,
    odds: float,
    bankroll: float,
    kelly_fraction: float = DEFAULT_SAFETY_FRACTION,
) -> Dict:
    """EV, value flag and Kelly stake for one market at the user's odds."""
    ev = ev_per_unit(odds, probability)
    kelly = kelly_stake(odds, probability, bankroll, kelly_fraction)
    return {
        "market": label,
        "probability": probability,
        "odds": odds,
        "implied_probability": implied_probability(odds),
        "ev": ev,
        "is_value": ev > 0,
        "kelly_stake": kelly.stake,
        "kelly_fraction": kelly.fraction,
    }


def evaluate_prediction(
    prediction: PredictionResult,
    market_odds: MarketOdds,
    bankroll: float,
    kelly_fraction: float = DEFAULT_SAFETY_FRACTION,
) -> List[Dict]:
    """
    Evaluate the three live markets the user trades.

    Only the stronger double-chance side is offered, priced at the single
    double-chance odds the user entered.
    """
    if prediction.double_chance_1x > prediction.double_chance_x2:
        dc_label, dc_prob = "Double Chance (1X)", prediction.double_chance_1x
    else:
        dc_label, dc_prob = "Double Chance (X2)", prediction.double_chance_x2

    return [
        evaluate_market(dc_label, dc_prob, market_odds.double_chance, bankroll, kelly_fraction),
        evaluate_market("Over 0.5 Goals", prediction.over_05, market_odds.over_05, bankroll, kelly_fraction),
        evaluate_market("Over 1.5 Goals", prediction.over_15, market_odds.over_15, bankroll, kelly_fraction),
    ]
