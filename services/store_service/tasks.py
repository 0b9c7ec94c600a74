"""Background maintenance tasks for the store service."""

from libs.common.logging import get_logger
from libs.db.config import AsyncSessionLocal
from services.store_service.services.promotion_ops import expire_promotions

logger = get_logger(__name__)


async def sweep_expired_promotions() -> int:
    """Clear the promoted flag on every product whose window has passed."""
    async with AsyncSessionLocal() as db:
        expired = await expire_promotions(db)
    logger.info("Promotion expiry sweep finished: %d expired", expired)
    return expired
