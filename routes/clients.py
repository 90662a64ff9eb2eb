from flask import Blueprint, render_template, request, redirect, url_for, current_app, session, flash
from mysql.connector import Error as DatabaseError
from auth_utils import login_required
from form_utils import validate_client_form

clients_bp = Blueprint('clients', __name__, url_prefix='/clients')

def fetch_clients(cur, user_id):
    cur.execute("SELECT id, name, created_at FROM clients WHERE user_id=%s ORDER BY name ASC", (user_id,))
    return cur.fetchall()

def find_client(cur, client_id, user_id):
    cur.execute("SELECT id, name FROM clients WHERE id=%s AND user_id=%s", (client_id, user_id))
    return cur.fetchone()

@clients_bp.route('/')
@login_required
def index():
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            clients = fetch_clients(cur, session['user_id'])
    except DatabaseError as e:
        current_app.logger.exception("Error fetching clients")
        flash(f"Error fetching clients: {e}", "error")
        clients = []
    finally:
        if conn is not None:
            conn.close()
    return render_template('clients/index.html', clients=clients)


@clients_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_client():
    if request.method == 'GET':
        return render_template('clients/form.html', client=None)

    values, errors = validate_client_form(request.form)
    if errors:
        for message in errors:
            flash(message, "error")
        return redirect(url_for('clients.add_client'))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor() as cur:
            cur.execute("INSERT INTO clients (user_id, name) VALUES (%s, %s)", (session['user_id'], values['name']))
            conn.commit()
    except DatabaseError as e:
        current_app.logger.exception("Error saving client")
        flash(f"Error saving client: {e}", "error")
        return redirect(url_for('clients.add_client'))
    finally:
        if conn is not None:
            conn.close()

    current_app.logger.info("Created client for user %s", session['user_id'])
    flash("Client added successfully!", "success")
    return redirect(url_for('clients.index'))


@clients_bp.route('/edit/<int:id>', methods=['GET', 'POST'])
@login_required
def edit_client(id):
    if request.method == 'POST':
        values, errors = validate_client_form(request.form)
        if errors:
            for message in errors:
                flash(message, "error")
            return redirect(url_for('clients.edit_client', id=id))

    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor(dictionary=True) as cur:
            client = find_client(cur, id, session['user_id'])
            if not client:
                return "Client not found", 404

            if request.method == 'GET':
                return render_template('clients/form.html', client=client)

            cur.execute("UPDATE clients SET name=%s WHERE id=%s AND user_id=%s", (values['name'], id, session['user_id']))
            conn.commit()
    except DatabaseError as e:
        current_app.logger.exception("Error saving client %s", id)
        flash(f"Error saving client: {e}", "error")
        if request.method == 'GET':
            return redirect(url_for('clients.index'))
        return redirect(url_for('clients.edit_client', id=id))
    finally:
        if conn is not None:
            conn.close()

    current_app.logger.info("Updated client %s for user %s", id, session['user_id'])
    flash("Client updated successfully!", "success")
    return redirect(url_for('clients.index'))


@clients_bp.route('/delete/<int:id>', methods=['GET'])
@login_required
def confirm_delete(id):
    return render_template(
        'confirm_delete.html',
        item_name="client",
        action=url_for('clients.delete_client', id=id),
        cancel=url_for('clients.index')
    )


@clients_bp.route('/delete/<int:id>', methods=['POST'])
@login_required
def delete_client(id):
    # Income rows that reference this client are left in place.
    conn = None
    try:
        conn = current_app.db_pool.get_connection()
        with conn.cursor() as cur:
            cur.execute("DELETE FROM clients WHERE id=%s AND user_id=%s", (id, session['user_id']))
            conn.commit()
        current_app.logger.info("Deleted client %s for user %s", id, session['user_id'])
        flash("Client deleted successfully!", "success")
    except DatabaseError as e:
        current_app.logger.exception("Error deleting client %s", id)
        flash(f"Error deleting client: {e}", "error")
    finally:
        if conn is not None:
            conn.close()
    return redirect(url_for('clients.index'))
