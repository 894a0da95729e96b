"""
Recommendation Engine

First-match decision table producing a TradingRecommendation.
"""

from app.services.recommendation.engine import (
    DECISION_TABLE,
    RecommendationContext,
    RecommendationRule,
    TradePlan,
    grade_confidence,
    recommend,
    risk_reward_ratio,
)

__all__ = [
    "DECISION_TABLE",
    "RecommendationContext",
    "RecommendationRule",
    "TradePlan",
    "grade_confidence",
    "recommend",
    "risk_reward_ratio",
]
