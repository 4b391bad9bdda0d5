import logging

import uvicorn

from settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("gemini_relay.main")


if __name__ == "__main__":
    logger.info("Server is running on port %d", settings.port)
    logger.info("Test with: http://localhost:%d/ai/gemini?text=Halo%%20dunia!", settings.port)
    uvicorn.run("app:app", host=settings.host, port=settings.port, reload=False)
