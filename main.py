"""
Main entrypoint for the Nominatim geocoding API.

Usage:
    Run the API directly (`python main.py`) or with uvicorn
    (`uvicorn tag_nominatim.api.app:app`). Host and port come from API_HOST and API_PORT,
    the upstream server from NOMINATIM_BASE_URL.
"""
import logging

import uvicorn

from tag_nominatim import config

logger = logging.getLogger(__name__)


def main():
    """
    Main function to run the API server.
    """
    try:
        logger.info(f"Starting API on {config.API_HOST}:{config.API_PORT} for {config.NOMINATIM_BASE_URL}")
        uvicorn.run(
            "tag_nominatim.api.app:app",
            host=config.API_HOST,
            port=config.API_PORT,
            log_level=config.LOG_LEVEL.lower(),
        )
        return 0
    except Exception as e:
        logger.error(f"An error occurred in the main function: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )
    exit_code = main()
    logger.info(f"Exiting with code {exit_code}")
    raise SystemExit(exit_code)
