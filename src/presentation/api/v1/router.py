from fastapi import APIRouter

from .health import health_router
from .orders import orders_router
from .redemption import redemption_router
from .customers import customers_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(orders_router, tags=["Orders"])
router.include_router(redemption_router, tags=["Redemptions"])
router.include_router(customers_router, tags=["Customers"])
