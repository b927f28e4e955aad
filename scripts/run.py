"""
Hourly block reconciliation entry point.
Schedule this file with cron (or any scheduler) to run once an hour.
Make sure you have run 'python scripts/authenticate.py' at least once.
"""

import sys
import time
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inbox_blocks.core.config_manager import Config
from inbox_blocks.core.orchestrator import OrchestratorFactory, log_run_summary
from inbox_blocks.models import ConfigError, RunSummary
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


def _fatal(message: str) -> int:
    summary = RunSummary(fatal=True)
    summary.record_error(message)
    log_run_summary(summary)
    return 1


def main() -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for a fatal error)
    """
    start_time = time.time()

    try:
        if not Config.validate():
            return _fatal("Configuration validation failed")
        logger.info("Configuration validated successfully")

        orchestrator = OrchestratorFactory.create()
        summary = orchestrator.run()
        return 1 if summary.fatal else 0

    except ConfigError as e:
        logger.error("Configuration is invalid", exc_info=True)
        return _fatal(str(e))

    except ConnectionError as e:
        logger.error("Authentication failed", exc_info=True)
        return _fatal(str(e))

    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        return 1

    except Exception as e:
        logger.error("Unexpected fatal error", exc_info=True)
        return _fatal(str(e))

    finally:
        elapsed = time.time() - start_time
        logger.info(f"Total execution time: {elapsed:.2f} seconds")


if __name__ == "__main__":
    sys.exit(main())
