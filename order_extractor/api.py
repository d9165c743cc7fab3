import logging
import os
from pathlib import Path

from fastapi import FastAPI

from order_extractor.builder import ExtractorBuilder
from order_extractor.config import AppConfig
from order_extractor.core.snapshot import (
    ExtractResponse,
    PageSnapshot,
    PageTypeRequest,
    PageTypeResponse,
    classify_page,
)
from order_extractor.services.page.html import HtmlPageContext

logger = logging.getLogger("order_extractor.api")

DEFAULT_CONFIG_PATH = Path("config.yaml")


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Factory function for creating the FastAPI app with config."""
    if config is None:
        config = AppConfig.from_yaml(DEFAULT_CONFIG_PATH) if DEFAULT_CONFIG_PATH.exists() else AppConfig()

    logging.basicConfig(level=config.log_level)
    os.environ.setdefault("OPIK_PROJECT_NAME", config.opik_project)
    orchestrator = ExtractorBuilder(config).build_orchestrator()

    app = FastAPI(title="Order Extractor")

    @app.post("/extract", response_model=ExtractResponse)
    async def extract_order_data(snapshot: PageSnapshot) -> ExtractResponse:
        """Run every extraction strategy against a posted page snapshot."""
        page = HtmlPageContext(snapshot.html, url=snapshot.url, globals_=snapshot.page_globals)
        try:
            data = await orchestrator.aextract(page)
        except Exception as e:
            logger.error(f"Extraction error for {snapshot.url}: {e}")
            return ExtractResponse(success=False, error=str(e))

        if data is None:
            logger.warning(f"No data extracted from {snapshot.url}")
            return ExtractResponse(success=False, error="No data found")

        logger.info(f"Extraction complete for {snapshot.url}: {len(data.orders)} orders")
        return ExtractResponse(success=True, data=data.to_wire())

    @app.post("/page-type", response_model=PageTypeResponse, response_model_by_alias=True)
    async def check_page_type(request: PageTypeRequest) -> PageTypeResponse:
        page_type = classify_page(request.url, config.orders_path)
        return PageTypeResponse(page_type=page_type, url=request.url)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


# Module-level app instance for uvicorn (CMD: uvicorn order_extractor.api:app)
app = create_app()
