from datetime import datetime
from zoneinfo import ZoneInfo
#

def now_trimmed():
    """Current datetime in India Standard Time, without microseconds"""
    tz_ist = ZoneInfo('Asia/Kolkata')
    return datetime.now(tz_ist).replace(microsecond=0)
