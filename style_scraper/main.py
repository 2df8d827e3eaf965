"""
Style Token Scraper - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from style_scraper import __version__
from style_scraper.config import config
from style_scraper.exceptions import ConfigurationError, InputError
from style_scraper.layers.pipeline import ScrapePipeline, build_request
from style_scraper.utils.logger import get_logger, set_trace_id


# Initialize FastAPI app
app = FastAPI(
    title="Style Token Scraper",
    description="Extracts normalized design tokens from a web page for page generation",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Initialize pipeline
pipeline = ScrapePipeline()

logger = get_logger("main")


def get_pipeline() -> ScrapePipeline:
    """Pipeline used by the routes; replaced in tests."""
    return pipeline


def configuration_error_response(error: ConfigurationError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Scraper is not configured", "missing": error.missing},
    )


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/scrape")
async def scrape(
    url: Optional[str] = Query(None, description="Absolute URL of the page to scrape"),
    brand: Optional[str] = Query(None, description="Brand name used to pick the logo"),
):
    """
    Extract design tokens for a URL.

    Always answers with a complete token set once the request is
    valid: if every fetch tier fails, the neutral fallback set is
    returned with the X-Style-Fallback header.
    """
    trace_id = set_trace_id()

    logger.info("scrape_request", url=url, brand=brand, trace_id=trace_id)
    active = get_pipeline()

    try:
        max_tier = active.max_tier()
    except ConfigurationError as e:
        return configuration_error_response(e)

    try:
        request = build_request(url, brand, max_tier=max_tier)
    except InputError as e:
        logger.warning("scrape_rejected", url=url, reason=str(e))
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        tokens, used_fallback = await active.scrape_or_fallback(request)
    except ConfigurationError as e:
        return configuration_error_response(e)

    headers = {"X-Trace-Id": trace_id}
    if used_fallback:
        headers["X-Style-Fallback"] = "true"
    return JSONResponse(content=tokens.to_dict(), headers=headers)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
