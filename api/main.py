import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Union

import httpx
from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pricing import (
    ItemDescription,
    Condition,
    PriceEstimator,
    estimate_manual,
    extract_keywords,
    analyze_resale
)
from providers import EbayConfig, EbayBrowseProvider, ConfigError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # market pricing is optional; manual estimates work without eBay credentials
    app.state.estimator = None
    app.state.config_error = None
    http_client = None
    try:
        config = EbayConfig.from_env().validate()
    except ConfigError as e:
        logger.error("eBay pricing unavailable: %s", e)
        app.state.config_error = str(e)
    else:
        http_client = httpx.AsyncClient(timeout=config.timeout)
        app.state.estimator = PriceEstimator(EbayBrowseProvider(config, http_client=http_client))

    yield

    if http_client is not None:
        await http_client.aclose()


app = FastAPI(
    title="Resale Pricer",
    description="Suggest resale prices from comparable eBay listings",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_estimator(request: Request) -> Optional[PriceEstimator]:
    """Market estimator built at startup, None when eBay is not configured"""
    return getattr(request.app.state, "estimator", None)


def require_estimator(request: Request, estimator: Optional[PriceEstimator]) -> PriceEstimator:
    if estimator is None:
        detail = getattr(request.app.state, "config_error", None) or "eBay pricing is not configured"
        raise HTTPException(status_code=503, detail=detail)
    return estimator


class EstimateRequest(BaseModel):
    brand: Optional[str] = None
    model: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    condition: Optional[Union[str, float]] = None
    usable_as_is: bool = True
    source: str = "ebay"  # ebay, manual
    include_profit: bool = False

    def to_item(self) -> ItemDescription:
        return ItemDescription(
            brand=self.brand,
            model=self.model,
            category=self.category,
            description=self.description,
            condition=Condition(rating=self.condition, usable_as_is=self.usable_as_is)
        )


class KeywordsResult(BaseModel):
    text: str
    keywords: List[str]


@app.get("/")
async def root():
    return {"status": "running", "app": "Resale Pricer"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.post("/estimate")
async def estimate(
    request: EstimateRequest,
    http_request: Request,
    estimator: Optional[PriceEstimator] = Depends(get_estimator)
):
    """Suggest a resale price for an item"""
    if request.source not in ("ebay", "manual"):
        raise HTTPException(status_code=400, detail=f"Unknown source: {request.source}")

    item = request.to_item()
    if request.source == "manual":
        result = estimate_manual(item)
    else:
        result = await require_estimator(http_request, estimator).estimate(item)

    response = result.to_dict()
    if request.include_profit:
        analysis = analyze_resale(result, item)
        response['profit'] = analysis.to_dict() if analysis else None
    return response


@app.post("/estimate/manual")
async def estimate_manual_only(request: EstimateRequest):
    """Heuristic estimate; needs no eBay credentials"""
    item = request.to_item()
    result = estimate_manual(item)

    response = result.to_dict()
    if request.include_profit:
        response['profit'] = analyze_resale(result, item).to_dict()
    return response


@app.get("/keywords", response_model=KeywordsResult)
async def keywords(text: str = Query(..., min_length=1), limit: int = Query(3, ge=1, le=10)):
    """Show which words of a description would be used for searching"""
    return KeywordsResult(text=text, keywords=extract_keywords(text, limit))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
