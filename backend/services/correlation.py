"""JD-to-JD correlation.

For every layer::

    layer_score(L) = sum(w_current(s) * w_past(s) * similarity(s, s'))
    overall_score  = sum(layer_score(L) * layer_weight_current(L))

Skills are compared as stored; profiles built by the create workflow already
hold canonical identifiers. Only the current profile's layer weights are used,
so the score is asymmetric.
"""

import logging
from collections.abc import Callable

from models.schemas.correlation import CorrelationResult, LayerCorrelationResult
from models.schemas.layers import ALL_LAYERS, SkillWeight
from services.skill_profile import WeightedSkillProfile

logger = logging.getLogger(__name__)

SimilarityFn = Callable[[str, str], float]


def exact_match_similarity(current_skill: str, past_skill: str) -> float:
    return 1.0 if current_skill == past_skill else 0.0


class JDCorrelationCalculator:
    """Deterministic weighted correlation between two profiles.

    ``similarity`` must return a value in [0, 1]. The default exact-match
    function gives 1.0 for identical identifiers and 0.0 otherwise; a graded
    function (skill graph, embeddings) can be plugged in without changing the
    formula. A current skill is matched against the identical past skill when
    present, otherwise against the past skill with the highest weighted
    similarity.
    """

    def __init__(self, similarity: SimilarityFn = exact_match_similarity) -> None:
        self._similarity = similarity

    def calculate(self, current: WeightedSkillProfile, past: WeightedSkillProfile) -> CorrelationResult:
        layer_breakdown: dict[str, LayerCorrelationResult] = {}
        overall_score = 0.0

        for layer in ALL_LAYERS:
            layer_weight = current.get_layer_weight(layer)
            result = self._calculate_layer(
                current.get_skills_for_layer(layer),
                past.get_skills_for_layer(layer),
            )
            result.layer_weight = layer_weight
            layer_breakdown[layer] = result
            overall_score += result.score * layer_weight

        logger.debug(
            "Correlation %s vs %s: %.4f", current.id, past.id, overall_score
        )
        return CorrelationResult(
            overall_score=overall_score,
            layer_breakdown=layer_breakdown,
            current_dictionary_version=current.dictionary_version,
            past_dictionary_version=past.dictionary_version,
        )

    def _calculate_layer(
        self,
        current_skills: list[SkillWeight],
        past_skills: list[SkillWeight],
    ) -> LayerCorrelationResult:
        if not current_skills:
            return LayerCorrelationResult()
        if not past_skills:
            return LayerCorrelationResult(missing_skills=[s.skill for s in current_skills])

        # Last occurrence wins when a layer repeats a skill.
        past_weights = {s.skill: s.weight for s in past_skills}

        score = 0.0
        matching: list[str] = []
        missing: list[str] = []
        for current_skill in current_skills:
            matched, contribution = self._contribution(current_skill, past_weights)
            if matched:
                score += contribution
                matching.append(current_skill.skill)
            else:
                missing.append(current_skill.skill)

        return LayerCorrelationResult(score=score, matching_skills=matching, missing_skills=missing)

    def _contribution(
        self, current_skill: SkillWeight, past_weights: dict[str, float]
    ) -> tuple[bool, float]:
        skill = current_skill.skill
        if skill in past_weights:
            return True, current_skill.weight * past_weights[skill] * self._similarity(skill, skill)

        matched = False
        best = 0.0
        for past_skill, past_weight in past_weights.items():
            similarity = self._similarity(skill, past_skill)
            if similarity > 0:
                matched = True
                best = max(best, past_weight * similarity)
        return matched, current_skill.weight * best
