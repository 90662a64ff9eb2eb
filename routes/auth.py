from flask import Blueprint, render_template, request, redirect, url_for, current_app, session, flash
from werkzeug.security import generate_password_hash, check_password_hash
from auth_utils import login_required
from form_utils import validate_signup_form

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

MIN_PASSWORD_LENGTH = 8

@auth_bp.route('/signup', methods=['GET', 'POST'])
def signup():
    if request.method == 'POST':
        values, errors = validate_signup_form(request.form, MIN_PASSWORD_LENGTH)
        if errors:
            for message in errors:
                flash(message, "error")
            return redirect(url_for('auth.signup'))

        conn = current_app.db_pool.get_connection()
        try:
            with conn.cursor(dictionary=True) as cur:
                cur.execute("SELECT id FROM users WHERE email=%s", (values['email'],))
                if cur.fetchone():
                    return "Email already exists", 400
                pw_hash = generate_password_hash(values['password'])
                cur.execute(
                    "INSERT INTO users (name, email, password_hash) VALUES (%s, %s, %s)",
                    (values['name'], values['email'], pw_hash)
                )
                conn.commit()
        finally:
            conn.close()

        current_app.logger.info("New account for %s", values['email'])
        flash("Account created. Please log in.", "success")
        return redirect(url_for('auth.login'))

    return render_template('auth/signup.html')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if 'user_id' in session:
        return redirect(url_for('dashboard.index'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        conn = current_app.db_pool.get_connection()
        try:
            with conn.cursor(dictionary=True) as cur:
                cur.execute("SELECT id, name, email, password_hash FROM users WHERE email=%s", (email,))
                user = cur.fetchone()
        finally:
            conn.close()

        if not user or not check_password_hash(user['password_hash'], password):
            flash("Invalid credentials. Want to sign up?", "error")
            return redirect(url_for('auth.login'))

        session.clear()
        session['user_id'] = user['id']
        session['user_name'] = user['name']
        session['user_email'] = user['email']

        return redirect(url_for('dashboard.index'))

    return render_template('auth/login.html')


@auth_bp.route('/logout')
def logout():
    session.clear()
    return redirect(url_for('auth.login'))


@auth_bp.route('/reset-password', methods=['GET', 'POST'])
@login_required
def reset_password():
    if request.method == 'POST':
        password = request.form.get('password', '')
        confirm = request.form.get('confirm_password', '')

        if len(password) < MIN_PASSWORD_LENGTH:
            flash(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", "error")
            return redirect(url_for('auth.reset_password'))
        if password != confirm:
            flash("Passwords do not match.", "error")
            return redirect(url_for('auth.reset_password'))

        conn = current_app.db_pool.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE users SET password_hash=%s WHERE id=%s",
                    (generate_password_hash(password), session['user_id'])
                )
                conn.commit()
        finally:
            conn.close()

        flash("Password updated.", "success")
        return redirect(url_for('dashboard.index'))

    return render_template('auth/reset_password.html')
