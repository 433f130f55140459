from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo, в таком виде оно хранится в БД"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()
