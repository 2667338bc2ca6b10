from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from cidms_cart.core.config import settings
from cidms_cart.core.database import close_mongo_connection
from cidms_cart.api.routes import cart
from cidms_cart.storage.factory import check_storage

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Check the cart storage before serving and release it on shutdown.

    Each request rebuilds its cart from storage, so the service refuses to
    start on a backend it cannot reach.
    """
    app.state.storage_backend = await run_in_threadpool(check_storage)
    yield
    close_mongo_connection()
    logger.info("Cart storage released")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Session cart API for CIDMS - persisted carts with stock clamping and checkout",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check with the active cart storage backend."""
    return {
        "status": "healthy",
        "service": "cidms-cart",
        "storage_backend": getattr(app.state, "storage_backend", settings.CART_STORAGE_BACKEND.lower())
    }


app.include_router(cart.router, prefix=f"{settings.API_V1_PREFIX}/cart", tags=["Cart"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
