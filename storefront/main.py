# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from storefront.api.errors import register_exception_handlers
from storefront.api.routers import health, users, products, carts, orders, reviews, favorites
from storefront.data.database import init_db
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database")
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    @app.get("/", tags=["health"])
    def root():
        return {"service": "storefront", "status": "ok"}

    # public + authenticated
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(orders.payment_router)
    app.include_router(reviews.router)
    app.include_router(favorites.router)

    # admin
    app.include_router(users.admin_router, prefix="/admin")
    app.include_router(products.admin_router, prefix="/admin")
    app.include_router(orders.admin_router, prefix="/admin")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
