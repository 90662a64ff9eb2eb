from flask import Blueprint, render_template, request, redirect, url_for, current_app, session, flash
from mysql.connector import Error as DatabaseError
from datetime import date
from auth_utils import login_required
from form_utils import validate_expense_form

expenses_bp = Blueprint('expenses', __name__, url_prefix='/expenses')

@expenses_bp.route('/')
@login_required
def index():
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            cur.execute(
                "SELECT id, description, amount, date FROM expense WHERE user_id=%s ORDER BY date DESC",
                (session['user_id'],)
            )
            expenses = [
                {"id": row['id'], "description": row['description'], "amount": row['amount'], "date": row['date']}
                for row in cur.fetchall()
            ]
    except DatabaseError as e:
        current_app.logger.exception("Error fetching expenses")
        flash(f"Error fetching expenses: {e}", "error")
        expenses = []
    finally:
        if conn is not None:
            conn.close()
    return render_template('expenses/index.html', expenses=expenses)

@expenses_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_expense():
    if request.method == 'GET':
        return render_template('expenses/form.html', expense=None, current_date=date.today())

    values, errors = validate_expense_form(request.form)
    if errors:
        for message in errors:
            flash(message, "error")
        return redirect(url_for('expenses.add_expense'))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor() as cur:
            cur.execute(
                "INSERT INTO expense (user_id, description, amount, date) VALUES (%s, %s, %s, %s)",
                (session['user_id'], values['description'], values['amount'], values['date'])
            )
            conn.commit()
    except DatabaseError as e:
        current_app.logger.exception("Error saving expense")
        flash(f"Error saving expense: {e}", "error")
        return redirect(url_for('expenses.add_expense'))
    finally:
        if conn is not None:
            conn.close()

    current_app.logger.info("Created expense for user %s", session['user_id'])
    flash("Expense added successfully!", "success")
    return redirect(url_for('expenses.index'))

@expenses_bp.route('/edit/<int:id>', methods=['GET', 'POST'])
@login_required
def edit_expense(id):
    if request.method == 'POST':
        values, errors = validate_expense_form(request.form)
        if errors:
            for message in errors:
                flash(message, "error")
            return redirect(url_for('expenses.edit_expense', id=id))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            cur.execute(
                "SELECT id, description, amount, date FROM expense WHERE id=%s AND user_id=%s",
                (id, session['user_id'])
            )
            expense = cur.fetchone()
            if not expense:
                return "Expense not found", 404

            if request.method == 'GET':
                return render_template('expenses/form.html', expense=expense, current_date=date.today())

            cur.execute(
                "UPDATE expense SET description=%s, amount=%s, date=%s WHERE id=%s AND user_id=%s",
                (values['description'], values['amount'], values['date'], id, session['user_id'])
            )
            conn.commit()
    except DatabaseError as e:
        current_app.logger.exception("Error saving expense %s", id)
        flash(f"Error saving expense: {e}", "error")
        if request.method == 'GET':
            return redirect(url_for('expenses.index'))
        return redirect(url_for('expenses.edit_expense', id=id))
    finally:
        if conn is not None:
            conn.close()

    current_app.logger.info("Updated expense %s for user %s", id, session['user_id'])
    flash("Expense updated successfully!", "success")
    return redirect(url_for('expenses.index'))

@expenses_bp.route('/delete/<int:id>', methods=['GET'])
@login_required
def confirm_delete(id):
    return render_template(
        'confirm_delete.html',
        item_name="expense",
        action=url_for('expenses.delete_expense', id=id),
        cancel=url_for('expenses.index')
    )

@expenses_bp.route('/delete/<int:id>', methods=['POST'])
@login_required
def delete_expense(id):
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor() as cur:
            cur.execute("DELETE FROM expense WHERE id=%s AND user_id=%s", (id, session['user_id']))
            conn.commit()
        current_app.logger.info("Deleted expense %s for user %s", id, session['user_id'])
        flash("Expense deleted successfully!", "success")
    except DatabaseError as e:
        current_app.logger.exception("Error deleting expense %s", id)
        flash(f"Error deleting expense: {e}", "error")
    finally:
        if conn is not None:
            conn.close()
    return redirect(url_for('expenses.index'))
