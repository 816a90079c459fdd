"""
Shared fixtures for report parsing and ingest tests.
"""

from datetime import datetime

import pytest
import pytz

from config import ServiceConfig
from storage.memory_store import InMemoryRecordStore


SAMPLE_REPORT = """📒 DAILY REPORT
🗓 Monday, January 1st, 2024
Accuracy: 87.5%
Wins 7️⃣ x 1️⃣ Losses

🌙 Overnight Session
✅ 02:00 • 🇦🇺AUD/USD🇺🇸OTC • Sell
✅² 03:30 • EUR/JPY • Buy

🌅 Morning Session
✅¹ 09:15 • 🇪🇺EUR/USD🇺🇸OTC • Buy
❌¹ 10:00 • GBP/JPY • Sell
❌ 11:30 • EURUSD • Buy
this line is chatter

☀️ Afternoon Session
✅ 14:05 • USD/CHF • buy
❌³ 15:45 • GBP/USD • SELL

🌃 Night Session
✅³ 21:00 • NZD/USD • Buy
✅ 22:10 • EUR/GBP • Sell
"""

SAMPLE_TIMES = ["02:00", "03:30", "09:15", "10:00", "14:05", "15:45", "21:00", "22:10"]


@pytest.fixture
def sample_report_text():
    """A well-formed report with 8 trades across all four sessions"""
    return SAMPLE_REPORT


@pytest.fixture
def fixed_clock():
    """2024-03-10 02:30 UTC (still 2024-03-09 in US/Eastern)"""
    return lambda: datetime(2024, 3, 10, 2, 30, tzinfo=pytz.utc)


@pytest.fixture
def service_config():
    return ServiceConfig(timezone=pytz.utc, source="telegram")


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()
