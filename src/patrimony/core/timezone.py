"""Timezone utilities for local (Brazil) time."""

from datetime import datetime

import pytz

LOCAL_TZ = pytz.timezone("America/Sao_Paulo")


def now_local() -> datetime:
    """Return current time in the local timezone."""
    return datetime.now(LOCAL_TZ)

