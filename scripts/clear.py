# File: clear.py
"""
Script to delete every managed block (message check and message response)
from the calendar across the lookahead window.
"""

import datetime
import sys
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inbox_blocks.core.orchestrator import OrchestratorFactory
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


def main() -> int:
    """
    Main entry point to clear all managed blocks.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    start_time = datetime.datetime.now()

    logger.info("="*60)
    logger.info("Starting Inbox Blocks cleanup")
    logger.info("="*60)

    try:
        orchestrator = OrchestratorFactory.create()
        total_deleted = orchestrator.clear_all()

        elapsed = (datetime.datetime.now() - start_time).total_seconds()
        logger.info("="*60)
        logger.info(f"Cleanup completed in {elapsed:.2f} seconds.")
        logger.info(f"Total blocks deleted: {total_deleted}")
        logger.info("="*60)
        return 0

    except Exception as e:
        elapsed = (datetime.datetime.now() - start_time).total_seconds()
        logger.error("="*60)
        logger.error(f"Cleanup failed after {elapsed:.2f} seconds due to an unexpected error.", exc_info=True)
        logger.error(f"Error: {e}")
        logger.error("="*60)
        return 1


if __name__ == '__main__':
    sys.exit(main())
