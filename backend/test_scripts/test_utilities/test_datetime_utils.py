"""
Tests for datetime_utils.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from backend.app.utils.datetime_utils import utcnow, today_date


def test_utcnow_is_aware():
    assert utcnow().tzinfo == timezone.utc


def test_today_date_is_utc_date():
    assert today_date() == datetime.now(timezone.utc).date()
