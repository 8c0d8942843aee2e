import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import config
from api.models import (
    AugmentRequest,
    AugmentResponse,
    MetricRequest,
    MetricResponse,
    PackageRow,
)
from engine import compute_metric, extract_price, format_metric, read_size
from pipelines.augment_page import augment_html, augment_source
from scraper.errors.exceptions import ExtractionError, NetworkError
from scraper.sources.page_fetch import is_url

log = logging.getLogger("pricepergb.api")

PIPELINE = config.build_pipeline_config()

app = FastAPI(title=config.API["TITLE"], description=config.API["DESCRIPTION"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _response(page, results) -> AugmentResponse:
    return AugmentResponse(
        html=page.html(),
        augmented=sum(1 for r in results if r.metric is not None),
        packages=[PackageRow(**r.to_dict()) for r in results],
    )


@app.get("/")
def root():
    return {"status": "PricePerGB API running"}


# 1️⃣ Einzelnes Paket: Preis- und Größentext -> Preis pro GB
@app.post("/metric", response_model=MetricResponse)
def metric(payload: MetricRequest):
    price = extract_price(payload.price_text)
    reading = read_size(payload.size_text, PIPELINE.vocabulary)
    value = compute_metric(price, reading.value)
    return MetricResponse(
        price=price,
        size_gb=reading.value,
        size_basis=reading.basis,
        metric=value,
        formatted=format_metric(value) if value is not None else None,
    )


# 2️⃣ Komplettes HTML augmentieren
@app.post("/augment", response_model=AugmentResponse)
def augment(payload: AugmentRequest):
    try:
        page, results = augment_html(payload.html, config=PIPELINE, sort=payload.sort, logger=log.info)
    except ExtractionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _response(page, results)


# 3️⃣ Seite laden (requests oder Playwright) und augmentieren
@app.get("/augment", response_model=AugmentResponse)
def augment_url(url: str, sort: bool = False, render: bool = False):
    if not is_url(url):
        raise HTTPException(status_code=422, detail="url must start with http:// or https://")
    try:
        page, results = augment_source(url, config=PIPELINE, sort=sort, render=render, logger=log.info)
    except ExtractionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _response(page, results)


if __name__ == "__main__":
    import uvicorn

    config.configure_logging()
    uvicorn.run(
        "api.main:app",
        host=config.API["HOST"],
        port=config.API["PORT"],
        reload=config.API["RELOAD"],
    )
