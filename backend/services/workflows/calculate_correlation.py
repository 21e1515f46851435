import logging

from models.schemas.correlation import CorrelationResult
from services.correlation import JDCorrelationCalculator
from services.exceptions import ProfileNotFoundError
from services.repositories.base import ProfileRepository

logger = logging.getLogger(__name__)


class CalculateCorrelationWorkflow:
    def __init__(
        self,
        profiles: ProfileRepository,
        calculator: JDCorrelationCalculator | None = None,
    ) -> None:
        self._profiles = profiles
        self._calculator = calculator or JDCorrelationCalculator()

    async def execute(self, current_id: str, past_id: str) -> CorrelationResult:
        current = await self._profiles.find_by_id(current_id)
        if current is None:
            raise ProfileNotFoundError(current_id, which="current")

        past = await self._profiles.find_by_id(past_id)
        if past is None:
            raise ProfileNotFoundError(past_id, which="past")

        if current.dictionary_version != past.dictionary_version:
            logger.info(
                "Correlating across dictionary versions: %s (%s) vs %s (%s)",
                current_id,
                current.dictionary_version,
                past_id,
                past.dictionary_version,
            )
        return self._calculator.calculate(current, past)
