"""
Run the TradeSignals backend server.
"""
import logging
import os

# Load environment before settings are read
from dotenv import load_dotenv

project_dir = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(project_dir, ".env"))

import uvicorn

from tradesignals.core.config import settings

if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("run_server")
    logger.info("Starting TradeSignals Backend Server...")
    logger.info(f"API Docs: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        "tradesignals.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
