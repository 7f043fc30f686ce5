import logging
import uuid
from typing import Iterable, Optional
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from pvinspect.config import ACCEPTED_TYPES, LOG_LEVEL, MAX_UPLOAD_SIZE, UPLOADS_DISABLED
from pvinspect.dal.upload_repo import UploadRepository
from pvinspect.models import DemoEntry
from pvinspect.panel_data import SHOWCASE_CATALOG
from pvinspect.routers.api import router as api_router
from pvinspect.routers.demo import router as demo_router
from pvinspect.routers.upload import router as upload_router
from pvinspect.services.intake_validator import IntakeValidator
from pvinspect.services.result_aggregator import ResultAggregator

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Simple Session Middleware
class SessionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        session_id = request.cookies.get("session_id")
        response = await call_next(request)

        if not session_id:
            # Set cookie for 1 day; the client sends it back on the next request
            response.set_cookie(key="session_id", value=str(uuid.uuid4()), max_age=86400)

        return response

def create_app(catalog: Optional[Iterable[DemoEntry]] = None,
               validator: Optional[IntakeValidator] = None) -> FastAPI:
    app = FastAPI(
        title="PV Inspect",
        description="FastAPI service for photovoltaic panel condition analysis",
        version="1.0.0"
    )

    app.state.aggregator = ResultAggregator(SHOWCASE_CATALOG if catalog is None else catalog)
    app.state.validator = validator or IntakeValidator(
        max_size=MAX_UPLOAD_SIZE,
        accepted_types=ACCEPTED_TYPES,
        disabled=UPLOADS_DISABLED
    )
    app.state.upload_repo = UploadRepository()

    app.add_middleware(SessionMiddleware)

    app.include_router(api_router)
    app.include_router(demo_router)
    app.include_router(upload_router)

    logger.info(f"Showcase catalog loaded with {len(app.state.aggregator)} entries")
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
