"""
Storefront - Application Entry Point
=====================================
FastAPI app initialization, background jobs, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from apscheduler.schedulers.background import BackgroundScheduler

from config import settings
from config.database import SessionLocal, Base, engine
from common.exceptions import StorefrontError, CommitError, status_for

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
scheduler_logger = logging.getLogger("storefront.scheduler")

# ==========================================
# Import ALL models so Alembic/Base can see them
# ==========================================
from modules.catalog.models import Product  # noqa: F401,E402
from modules.order.models import Order, OrderItem, OrderStatusLog  # noqa: F401,E402

# ==========================================
# Import routers
# ==========================================
from modules.catalog.routes import router as catalog_router  # noqa: E402
from modules.catalog.admin_routes import router as catalog_admin_router  # noqa: E402
from modules.cart.routes import router as cart_router  # noqa: E402
from modules.order.routes import router as order_router  # noqa: E402
from modules.order.admin_routes import router as order_admin_router  # noqa: E402


# ==========================================
# Background Scheduler: Expired Order Cleanup
# ==========================================
def _cleanup_expired_orders():
    """Background job: cancel pending orders that were never paid."""
    db = SessionLocal()
    try:
        from modules.order.service import order_service
        count = order_service.cancel_expired_orders(db)
        if count:
            scheduler_logger.info(f"Cancelled {count} expired orders")
    except Exception as e:
        db.rollback()
        scheduler_logger.error(f"Cleanup error: {e}")
    finally:
        db.close()


scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)

    if settings.SCHEDULER_ENABLED:
        scheduler.add_job(
            _cleanup_expired_orders, 'interval',
            seconds=settings.EXPIRED_ORDER_SWEEP_SECONDS, id='expired_orders',
        )
        scheduler.start()
        scheduler_logger.info(f"Background scheduler started (orders: {settings.EXPIRED_ORDER_SWEEP_SECONDS}s)")
    yield
    if scheduler.running:
        scheduler.shutdown()
        scheduler_logger.info("Background scheduler stopped")


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Storefront",
    description="Cart, catalog stock and order checkout API",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


# ==========================================
# Exception handler: uncaught business errors
# ==========================================
@app.exception_handler(StorefrontError)
async def storefront_exception_handler(request: Request, exc: StorefrontError):
    """Fallback for business errors a route didn't convert itself."""
    detail = exc.to_dict() if isinstance(exc, CommitError) else exc.message
    return JSONResponse({"detail": detail}, status_code=status_for(exc))


# ==========================================
# Register Routers
# ==========================================
app.include_router(catalog_router)
app.include_router(catalog_admin_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(order_admin_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}
