"""
Fix Prioritizer

Ranks the five risk categories by weighted impact and returns the top
three as fix priorities:

    Weighted_Impact = Category_Risk × Health_Weight

Ties keep the fixed category order (speed, ux, seo, conversion, scaling).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Union

from .risk import CATEGORY_ORDER, HEALTH_WEIGHTS, RiskScores

logger = logging.getLogger(__name__)


CATEGORY_LABELS: Dict[str, str] = {
    "speed": "Speed",
    "ux": "UX",
    "seo": "SEO",
    "conversion": "Conversion",
    "scaling": "Scaling",
}

MAX_PRIORITIES = 3


@dataclass(frozen=True)
class FixPriority:
    """A category selected for fixing."""
    category: str
    score: int
    priority: str  # High / Medium / Low

    def to_dict(self) -> Dict[str, object]:
        return {
            "category": self.category,
            "score": self.score,
            "priority": self.priority,
        }


def get_priority_label(score: float) -> str:
    """
    Priority label for a fix. Coarser than RiskLevel: 70+ is High,
    40+ is Medium, anything else Low.
    """
    if score >= 70:
        return "High"
    if score >= 40:
        return "Medium"
    return "Low"


def _category_scores(risks: Union[RiskScores, Mapping[str, float]]) -> Dict[str, float]:
    if isinstance(risks, RiskScores):
        return risks.by_category()

    scores = {}
    for category in CATEGORY_ORDER:
        # "speed", "speed_risk" or "speedRisk"
        for key in (category, f"{category}_risk", f"{category}Risk"):
            if key in risks:
                scores[category] = risks[key]
                break
        else:
            raise KeyError(f"No risk score for category '{category}'")
    return scores


def generate_fix_priorities(risks: Union[RiskScores, Mapping[str, float]]) -> List[FixPriority]:
    """
    Pick the three categories whose fix moves overall health the most.

    Args:
        risks: RiskScores, or a mapping of risk scores keyed by category
            ("speed"), attribute ("speed_risk") or wire name ("speedRisk").
            Extra keys such as overallHealth are ignored.

    Returns:
        Exactly three FixPriority entries, highest weighted impact first

    Raises:
        KeyError: If a category has no score
    """
    scores = _category_scores(risks)
    ranked = [
        (category, scores[category], scores[category] * HEALTH_WEIGHTS[category])
        for category in CATEGORY_ORDER
    ]
    # sorted() is stable, so equal impacts stay in category order
    ranked = sorted(ranked, key=lambda item: item[2], reverse=True)

    priorities = [
        FixPriority(
            category=CATEGORY_LABELS[category],
            score=score,
            priority=get_priority_label(score),
        )
        for category, score, _ in ranked[:MAX_PRIORITIES]
    ]
    logger.debug(f"Fix priorities: {[p.category for p in priorities]}")
    return priorities
