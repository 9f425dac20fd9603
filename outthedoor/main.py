from fastapi import FastAPI
from outthedoor.routes.contract_router import contract_router
from outthedoor.routes.quote_router import quote_router
from outthedoor.routes.timeline_router import timeline_router
from contextlib import asynccontextmanager
from outthedoor.core.config import settings
from outthedoor.core.exceptions import QuoteServiceError, quote_service_error_handler
from outthedoor.core.logger import get_logger
from outthedoor.core.middleware import log_requests
from outthedoor.services.record_store import get_store
from outthedoor.services.seed_service import seed_demo_data
from fastapi.middleware.cors import CORSMiddleware

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):

    if settings.SEED_DEMO_DATA:
        seed_demo_data(get_store())
    logger.info(f"{settings.app_name} startup complete")

    yield

    logger.info(f"{settings.app_name} shutdown initiated")

app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
app.add_exception_handler(QuoteServiceError, quote_service_error_handler)
app.include_router(contract_router)
app.include_router(quote_router)
app.include_router(timeline_router)
