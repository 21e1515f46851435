import logging

from models.requests import CreateBidRequest
from models.schemas.correlation import BidMatchRateResult
from services.bid import Bid
from services.exceptions import BidNotFoundError, InvalidBidError
from services.match_rate import WeightedMatchRateCalculator
from services.repositories.base import BidRepository
from services.roles import RoleService

logger = logging.getLogger(__name__)


class CreateBidWorkflow:
    def __init__(self, bids: BidRepository, role_service: RoleService | None = None) -> None:
        self._bids = bids
        self._role_service = role_service or RoleService()

    async def execute(self, request: CreateBidRequest) -> Bid:
        bid = Bid.create(request.model_dump(), self._role_service)
        await self._bids.save(bid)
        logger.info("Created bid %s (%s at %s)", bid.id, bid.role, bid.company)
        return bid


class CalculateBidMatchRateWorkflow:
    """Score one bid against every other layer-format bid, best match first."""

    def __init__(
        self,
        bids: BidRepository,
        calculator: WeightedMatchRateCalculator | None = None,
    ) -> None:
        self._bids = bids
        self._calculator = calculator or WeightedMatchRateCalculator()

    async def execute(self, bid_id: str) -> list[BidMatchRateResult]:
        current = await self._bids.find_by_id(bid_id)
        if current is None:
            raise BidNotFoundError(bid_id)
        if not current.is_layer_skills_format():
            raise InvalidBidError("Current bid must use layer skills for match rate calculation")

        results = []
        for other in await self._bids.find_all():
            if other.id == bid_id or not other.is_layer_skills_format():
                continue
            match = self._calculator.calculate(current, other)
            results.append(
                BidMatchRateResult(
                    bid_id=other.id,
                    company=other.company,
                    role=other.role,
                    match_rate=match.overall_match_rate,
                    match_rate_percentage=match.overall_match_rate * 100,
                    layer_breakdown=match.layer_breakdown,
                )
            )

        results.sort(key=lambda r: r.match_rate, reverse=True)
        return results
