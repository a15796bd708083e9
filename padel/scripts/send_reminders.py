"""
Send Reminders Script
Sends the 24 hour and 3 hour game reminders once and exits.
Meant for an external scheduler (cron, a CI schedule) when the
in-process reminder loop is disabled.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from padel.database.supabase_client import get_service_supabase
from padel.modules.reminders.service import ReminderService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    try:
        result = ReminderService(get_service_supabase()).send_reminders()
        for reminder in result["reminders"]:
            logger.info(f"{reminder['type']}: booking {reminder['booking_id']} ({reminder['player_count']} players)")
        logger.info(f"Done, {result['sent']} reminder(s) sent")
    except Exception as e:
        logger.error(f"Error sending reminders: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
