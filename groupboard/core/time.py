from datetime import datetime, timezone


def now_utc():
    """返回带时区的当前 UTC 时间"""
    return datetime.now(timezone.utc)
