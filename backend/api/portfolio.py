"""Portfolio valuation API endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import get_market_data_service
from database import get_db
from schemas.portfolio_valuation import PortfolioData, PortfolioFilter
from services.market_data_service import MarketDataService
from services.portfolio_valuation_service import PortfolioValuationService

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


@router.post("", response_model=PortfolioData)
def get_portfolio_data(
    portfolio_filter: PortfolioFilter,
    db: Session = Depends(get_db),
    market_data: MarketDataService = Depends(get_market_data_service),
):
    """Graph, holdings table and summary text for the filtered portfolio.

    Companies without a quote or price history are listed in ``skipped``
    rather than failing the request.
    """
    return PortfolioValuationService(market_data).get_portfolio_data(db, portfolio_filter)
