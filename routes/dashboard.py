from flask import Blueprint, render_template, request, current_app, session, flash
from mysql.connector import Error as DatabaseError
from auth_utils import login_required
from ledger_utils import build_transactions
from summary_utils import (
    fetch_monthly_summary, format_month, month_bounds, parse_month, shift_month, zero_summary,
)
from routes.clients import fetch_clients

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='')

VIEWS = ('list', 'dashboard')

def fetch_transactions(cur, user_id, currency, first_day=None, last_day=None):
    """All of the user's entries as one list, optionally limited to a date range."""
    date_filter = ""
    params = (user_id,)
    if first_day is not None and last_day is not None:
        date_filter = " AND date >= %s AND date <= %s"
        params = (user_id, first_day, last_day)

    client_map = {c['id']: c['name'] for c in fetch_clients(cur, user_id)}

    cur.execute(
        "SELECT id, description, amount, date, client_id FROM income WHERE user_id=%s" + date_filter + " ORDER BY date DESC",
        params
    )
    incomes = cur.fetchall()

    cur.execute(
        "SELECT id, description, amount, date FROM expense WHERE user_id=%s" + date_filter + " ORDER BY date DESC",
        params
    )
    expenses = cur.fetchall()

    return build_transactions(incomes, expenses, client_map, currency)


@dashboard_bp.route('/')
@login_required
def index():
    month = parse_month(request.args.get('month'))
    view = request.args.get('view', 'list')
    if view not in VIEWS:
        view = 'list'
    first_day, last_day = month_bounds(month)

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            try:
                summary = fetch_monthly_summary(cur, session['user_id'], month)
            except DatabaseError as e:
                current_app.logger.exception("Error fetching summary for %s", format_month(month))
                flash(f"Error fetching summary: {e}", "error")
                summary = zero_summary()

            try:
                transactions = fetch_transactions(
                    cur, session['user_id'], current_app.config['CURRENCY'], first_day, last_day
                )
            except DatabaseError as e:
                current_app.logger.exception("Error fetching transactions for %s", format_month(month))
                flash(f"Error fetching transactions: {e}", "error")
                transactions = []
    except DatabaseError as e:
        current_app.logger.exception("Error fetching summary for %s", format_month(month))
        flash(f"Error fetching summary: {e}", "error")
        summary = zero_summary()
        transactions = []
    finally:
        if conn is not None:
            conn.close()

    chart_labels = ['Income', 'Expenses', 'Net Income']
    chart_values = [float(summary['income']), float(summary['expenses']), float(summary['net'])]

    return render_template(
        "dashboard.html",
        summary=summary,
        month=month,
        month_label=month.strftime('%B %Y'),
        current_month=format_month(month),
        prev_month=format_month(shift_month(month, -1)),
        next_month=format_month(shift_month(month, 1)),
        view=view,
        transactions=transactions,
        chart_labels=chart_labels,
        chart_values=chart_values,
        currency=current_app.config['CURRENCY'],
    )
