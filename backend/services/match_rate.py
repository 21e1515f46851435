"""Bid-to-Bid weighted match rate.

Same weighted-product formula as services.correlation, but bids are not
canonicalized against the dictionary, so skill names are compared
case-insensitively here.
"""

from models.schemas.correlation import LayerCorrelationResult, MatchResult
from models.schemas.layers import ALL_LAYERS, SkillWeight
from services.bid import Bid


class WeightedMatchRateCalculator:
    def calculate(self, current_bid: Bid, matched_bid: Bid) -> MatchResult:
        layer_breakdown: dict[str, LayerCorrelationResult] = {}
        overall = 0.0

        for layer in ALL_LAYERS:
            current_skills = current_bid.get_skills_for_layer(layer)
            matched_skills = matched_bid.get_skills_for_layer(layer)
            layer_weight = current_bid.get_layer_weight(layer)

            score = self._layer_score(current_skills, matched_skills)
            matched_names = {s.skill.lower() for s in matched_skills}
            layer_breakdown[layer] = LayerCorrelationResult(
                score=score,
                matching_skills=[s.skill for s in current_skills if s.skill.lower() in matched_names],
                missing_skills=[s.skill for s in current_skills if s.skill.lower() not in matched_names],
                layer_weight=layer_weight,
            )
            overall += score * layer_weight

        return MatchResult(overall_match_rate=overall, layer_breakdown=layer_breakdown)

    @staticmethod
    def _layer_score(current_skills: list[SkillWeight], matched_skills: list[SkillWeight]) -> float:
        if not current_skills:
            return 0.0
        matched_weights = {s.skill.lower(): s.weight for s in matched_skills}
        score = 0.0
        for skill in current_skills:
            matched_weight = matched_weights.get(skill.skill.lower())
            if matched_weight is not None:
                score += skill.weight * matched_weight
        return score
