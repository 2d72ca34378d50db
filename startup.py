import logging
import os
import sys
import traceback

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)


def _mask(value):
    if not value:
        return "NOT SET"
    return f"{value[:8]}..." if len(value) > 8 else "SET"


if __name__ == "__main__":
    logger.info("ChartScribe Backend Startup")
    logger.info(f"Python version: {sys.version.split()[0]}")
    logger.info(f"  MONGO_URI: {_mask(os.environ.get('MONGO_URI'))}")
    logger.info(f"  AZURE_OPENAI_ENDPOINT: {os.environ.get('AZURE_OPENAI_ENDPOINT') or 'NOT SET'}")
    logger.info(f"  AZURE_OPENAI_API_KEY: {_mask(os.environ.get('AZURE_OPENAI_API_KEY'))}")

    try:
        from chartscribe.core.config import get_settings
        settings = get_settings()
    except ValueError as ve:
        logger.error(f"Configuration validation failed: {ve}")
        logger.error("Check MONGO_URI, APP_ENV and LOG_LEVEL")
        sys.exit(1)

    port = int(os.environ.get("PORT", settings.port))
    host = os.environ.get("HOST", settings.host)

    try:
        from chartscribe.app import app  # noqa: F401
    except Exception as import_error:
        logger.error(f"Failed to import chartscribe.app: {import_error}")
        logger.error(traceback.format_exc())
        sys.exit(1)

    logger.info(f"Starting uvicorn on {host}:{port} (env={settings.app_env})")
    try:
        uvicorn.run(
            "chartscribe.app:app",
            host=host,
            port=port,
            workers=1,
            log_level="info",
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        logger.info("Shutting down due to keyboard interrupt")
        sys.exit(0)
