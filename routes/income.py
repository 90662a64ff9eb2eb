from flask import Blueprint, render_template, request, redirect, url_for, current_app, session, flash
from mysql.connector import Error as DatabaseError
from datetime import date
from auth_utils import login_required
from form_utils import validate_income_form
from ledger_utils import client_label
from routes.clients import fetch_clients, find_client

income_bp = Blueprint('income', __name__, url_prefix='/income')

@income_bp.route('/')
@login_required
def index():
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            try:
                clients = fetch_clients(cur, session['user_id'])
            except DatabaseError as e:
                current_app.logger.exception("Error fetching clients")
                flash(f"Error fetching clients: {e}", "error")
                clients = []
            client_map = {c['id']: c['name'] for c in clients}

            try:
                cur.execute(
                    "SELECT id, description, amount, date, client_id FROM income WHERE user_id=%s ORDER BY date DESC",
                    (session['user_id'],)
                )
                incomes = [
                    {"id": row['id'], "description": row['description'], "amount": row['amount'],
                     "date": row['date'], "client_id": row['client_id'],
                     "client": client_label(row['client_id'], client_map)}
                    for row in cur.fetchall()
                ]
            except DatabaseError as e:
                current_app.logger.exception("Error fetching income")
                flash(f"Error fetching income: {e}", "error")
                incomes = []
    except DatabaseError as e:
        current_app.logger.exception("Error fetching income")
        flash(f"Error fetching income: {e}", "error")
        incomes = []
    finally:
        if conn is not None:
            conn.close()
    return render_template('income/index.html', incomes=incomes)


def _load_clients():
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            return fetch_clients(cur, session['user_id'])
    except DatabaseError as e:
        current_app.logger.exception("Error fetching clients")
        flash(f"Error fetching clients: {e}", "error")
        return []
    finally:
        if conn is not None:
            conn.close()


def _client_allowed(cur, client_id):
    """No client, or a client owned by the current user."""
    return client_id is None or find_client(cur, client_id, session['user_id']) is not None


@income_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_income():
    if request.method == 'GET':
        return render_template('income/form.html', income=None, clients=_load_clients(), current_date=date.today())

    values, errors = validate_income_form(request.form)
    if errors:
        for message in errors:
            flash(message, "error")
        return redirect(url_for('income.add_income'))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            if not _client_allowed(cur, values['client_id']):
                flash("Invalid client selected.", "error")
                return redirect(url_for('income.add_income'))
            cur.execute(
                "INSERT INTO income (user_id, description, amount, date, client_id) VALUES (%s, %s, %s, %s, %s)",
                (session['user_id'], values['description'], values['amount'], values['date'], values['client_id'])
            )
            conn.commit()
    except DatabaseError as e:
        current_app.logger.exception("Error saving income")
        flash(f"Error saving income: {e}", "error")
        return redirect(url_for('income.add_income'))
    finally:
        if conn is not None:
            conn.close()

    current_app.logger.info("Created income for user %s", session['user_id'])
    flash("Income added successfully!", "success")
    return redirect(url_for('income.index'))


@income_bp.route('/edit/<int:id>', methods=['GET', 'POST'])
@login_required
def edit_income(id):
    if request.method == 'POST':
        values, errors = validate_income_form(request.form)
        if errors:
            for message in errors:
                flash(message, "error")
            return redirect(url_for('income.edit_income', id=id))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            cur.execute(
                "SELECT id, description, amount, date, client_id FROM income WHERE id=%s AND user_id=%s",
                (id, session['user_id'])
            )
            income = cur.fetchone()
            if not income:
                return "Income not found", 404

            if request.method == 'GET':
                clients = fetch_clients(cur, session['user_id'])
                return render_template('income/form.html', income=income, clients=clients, current_date=date.today())

            if not _client_allowed(cur, values['client_id']):
                flash("Invalid client selected.", "error")
                return redirect(url_for('income.edit_income', id=id))

            cur.execute(
                "UPDATE income SET description=%s, amount=%s, date=%s, client_id=%s WHERE id=%s AND user_id=%s",
                (values['description'], values['amount'], values['date'], values['client_id'], id, session['user_id'])
            )
            conn.commit()
    except DatabaseError as e:
        current_app.logger.exception("Error saving income %s", id)
        flash(f"Error saving income: {e}", "error")
        if request.method == 'GET':
            return redirect(url_for('income.index'))
        return redirect(url_for('income.edit_income', id=id))
    finally:
        if conn is not None:
            conn.close()

    current_app.logger.info("Updated income %s for user %s", id, session['user_id'])
    flash("Income updated successfully!", "success")
    return redirect(url_for('income.index'))


@income_bp.route('/delete/<int:id>', methods=['GET'])
@login_required
def confirm_delete(id):
    return render_template(
        'confirm_delete.html',
        item_name="income record",
        action=url_for('income.delete_income', id=id),
        cancel=url_for('income.index')
    )


@income_bp.route('/delete/<int:id>', methods=['POST'])
@login_required
def delete_income(id):
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor() as cur:
            cur.execute("DELETE FROM income WHERE id=%s AND user_id=%s", (id, session['user_id']))
            conn.commit()
        current_app.logger.info("Deleted income %s for user %s", id, session['user_id'])
        flash("Income deleted successfully!", "success")
    except DatabaseError as e:
        current_app.logger.exception("Error deleting income %s", id)
        flash(f"Error deleting income: {e}", "error")
    finally:
        if conn is not None:
            conn.close()
    return redirect(url_for('income.index'))
