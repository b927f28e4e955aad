"""
One-time Google authentication.
Opens a browser for the OAuth consent screen and writes token.json.
Place credentials.json (OAuth client, desktop app) in the project root first.
"""

import sys
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inbox_blocks.auth.google_auth import create_initial_token


def main() -> int:
    print("Setting up Google Calendar access for Inbox Blocks...")
    if not create_initial_token():
        print("Google authentication failed.")
        return 1
    print("\nSetup complete! Schedule 'python scripts/run.py' to run every hour.")
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nSetup cancelled.")
        sys.exit(1)
