# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.data import models  # noqa: F401  registers every table on Base.metadata
from storefront.data.database import Base, engine
from storefront.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def init_db():
    logger.info(f"Creating tables: {sorted(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise


configure_logging()
init_db()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
