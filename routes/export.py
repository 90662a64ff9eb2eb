from flask import Blueprint, Response, request, redirect, url_for, current_app, session, flash
from mysql.connector import Error as DatabaseError
from auth_utils import login_required
from ledger_utils import transactions_to_csv
from summary_utils import month_bounds, parse_month
from routes.dashboard import fetch_transactions

export_bp = Blueprint('export', __name__, url_prefix='/export')

@export_bp.route('/transactions.csv')
@login_required
def transactions_csv():
    month_arg = request.args.get('month')
    first_day = last_day = None
    if month_arg:
        first_day, last_day = month_bounds(parse_month(month_arg))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            transactions = fetch_transactions(
                cur, session['user_id'], current_app.config['CURRENCY'], first_day, last_day
            )
    except DatabaseError as e:
        current_app.logger.exception("Error exporting transactions")
        flash(f"Error exporting transactions: {e}", "error")
        return redirect(url_for('dashboard.index'))
    finally:
        if conn is not None:
            conn.close()

    return Response(
        transactions_to_csv(transactions),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=transactions.csv'}
    )
