from datetime import MAXYEAR, MINYEAR, date, datetime
from decimal import Decimal
from dateutil.relativedelta import relativedelta

MONTH_FORMAT = '%Y-%m'


def zero_summary():
    return {'income': Decimal('0'), 'expenses': Decimal('0'), 'net': Decimal('0')}


def parse_month(value, default=None):
    """Parse ``YYYY-MM`` into the first day of that month.

    Falls back to ``default`` (or the current month) when the value is
    missing, malformed, or at the edge of the calendar.
    """
    fallback = (default or date.today()).replace(day=1)
    if not value:
        return fallback
    try:
        month = datetime.strptime(value, MONTH_FORMAT).date()
    except ValueError:
        return fallback
    # the first and last representable months have no neighbour to link to
    if (month.year, month.month) in ((MINYEAR, 1), (MAXYEAR, 12)):
        return fallback
    return month


def format_month(ref):
    return ref.strftime(MONTH_FORMAT)


def month_bounds(ref):
    """First and last calendar day of the month containing ``ref``."""
    first_day = ref.replace(day=1)
    last_day = first_day + relativedelta(months=1, days=-1)
    return first_day, last_day


def shift_month(ref, months):
    return ref + relativedelta(months=months)


def fetch_monthly_summary(cur, user_id, ref):
    """Income, expense and net totals for the month containing ``ref``.

    ``cur`` must be a dictionary cursor. Database errors propagate to the
    caller, which owns the decision to zero the summary.
    """
    first_day, last_day = month_bounds(ref)

    cur.execute(
        "SELECT COALESCE(SUM(amount), 0) AS total FROM income "
        "WHERE user_id=%s AND date >= %s AND date <= %s",
        (user_id, first_day, last_day)
    )
    total_income = Decimal(str(cur.fetchone()['total']))

    cur.execute(
        "SELECT COALESCE(SUM(amount), 0) AS total FROM expense "
        "WHERE user_id=%s AND date >= %s AND date <= %s",
        (user_id, first_day, last_day)
    )
    total_expenses = Decimal(str(cur.fetchone()['total']))

    return {
        'income': total_income,
        'expenses': total_expenses,
        'net': total_income - total_expenses,
    }
