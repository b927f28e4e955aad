"""
Print the managed blocks and the classified events for the lookahead window.
Read-only: nothing on the calendar is changed.

Usage:
    python scripts/inspect_calendar.py [--blocks | --events]
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inbox_blocks.core.orchestrator import OrchestratorFactory
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Inspect managed blocks and calendar conflicts")
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--blocks', action='store_true', help="only list managed blocks")
    group.add_argument('--events', action='store_true', help="only list events with classification")
    args = parser.parse_args(argv)

    try:
        orchestrator = OrchestratorFactory.create()
    except Exception as e:
        logger.error(f"Could not initialize: {e}", exc_info=True)
        return 1

    if not args.events:
        print("\n=== MANAGED BLOCKS ===")
        print("\n".join(orchestrator.inspect_blocks()))
    if not args.blocks:
        print("\n=== EVENTS ([x] = conflict) ===")
        print("\n".join(orchestrator.inspect_events()))
    return 0


if __name__ == '__main__':
    sys.exit(main())
