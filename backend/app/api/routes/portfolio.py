"""Holdings upload and dashboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.dependencies.dashboard import get_dashboard_refresher
from app.schemas import DashboardResponse, HoldingSchema
from app.services.dashboard import DashboardRefresher
from app.services.holdings_csv import HoldingsCSVError, parse_holdings_csv, write_holdings_csv

router = APIRouter()


@router.get("/holdings", response_model=list[HoldingSchema])
async def get_holdings(
    refresher: DashboardRefresher = Depends(get_dashboard_refresher),
) -> list[HoldingSchema]:
    return [HoldingSchema.model_validate(h) for h in refresher.holdings]


@router.put("/holdings", response_model=DashboardResponse)
async def put_holdings(
    payload: list[HoldingSchema],
    refresher: DashboardRefresher = Depends(get_dashboard_refresher),
) -> DashboardResponse:
    dashboard = await refresher.load([item.to_domain() for item in payload])
    return DashboardResponse.from_dashboard(dashboard)


@router.post("/holdings/csv", response_model=DashboardResponse)
async def post_holdings_csv(
    request: Request,
    refresher: DashboardRefresher = Depends(get_dashboard_refresher),
) -> DashboardResponse:
    body = await request.body()
    try:
        holdings = parse_holdings_csv(body)
    except HoldingsCSVError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    dashboard = await refresher.load(holdings)
    return DashboardResponse.from_dashboard(dashboard)


@router.get("/holdings/csv")
async def get_holdings_csv(
    refresher: DashboardRefresher = Depends(get_dashboard_refresher),
) -> Response:
    content = write_holdings_csv(refresher.holdings, bom=True)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="portfolio.csv"'},
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    refresher: DashboardRefresher = Depends(get_dashboard_refresher),
) -> DashboardResponse:
    dashboard = await refresher.refresh()
    return DashboardResponse.from_dashboard(dashboard)


__all__ = ["router"]
