"""
Server-side validation for the ledger forms.

Each ``validate_*_form`` takes the submitted form mapping and returns a
``(values, errors)`` pair. ``values`` holds the cleaned fields ready for the
query; ``errors`` is a list of user-facing messages. A non-empty ``errors``
means nothing may be written.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

MAX_AMOUNT = Decimal('99999999.99')
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
MIN_CLIENT_NAME_LENGTH = 2

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def parse_amount(raw):
    """Return a positive Decimal with two places, or raise ValueError."""
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("Amount must be a number.")
    if not amount.is_finite():
        raise ValueError("Amount must be a number.")
    if amount <= 0:
        raise ValueError("Amount must be positive.")
    if amount > MAX_AMOUNT:
        raise ValueError("Amount is too large.")
    return amount.quantize(Decimal('0.01'))


def parse_date(raw):
    if isinstance(raw, date):
        return raw
    if not raw or not str(raw).strip():
        raise ValueError("Please select a date.")
    try:
        return datetime.strptime(str(raw).strip(), '%Y-%m-%d').date()
    except ValueError:
        raise ValueError("Date must be in YYYY-MM-DD format.")


def parse_client_id(raw):
    """An empty selection means "no client"."""
    if raw is None or str(raw).strip() in ('', 'none', 'null'):
        return None
    try:
        client_id = int(str(raw).strip())
    except ValueError:
        raise ValueError("Invalid client selected.")
    if client_id <= 0:
        raise ValueError("Invalid client selected.")
    return client_id


def validate_client_form(form):
    errors = []
    name = (form.get('name') or '').strip()
    if len(name) < MIN_CLIENT_NAME_LENGTH:
        errors.append(f"Client name must be at least {MIN_CLIENT_NAME_LENGTH} characters.")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Client name must be at most {MAX_NAME_LENGTH} characters.")
    return {'name': name}, errors


def _validate_entry(form, description_required):
    errors = []
    values = {}

    description = (form.get('description') or '').strip()
    if description_required and not description:
        errors.append("Description is required.")
    elif len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters.")
    values['description'] = description or None

    try:
        values['amount'] = parse_amount(form.get('amount', ''))
    except ValueError as e:
        errors.append(str(e))

    try:
        values['date'] = parse_date(form.get('date'))
    except ValueError as e:
        errors.append(str(e))

    return values, errors


def validate_income_form(form):
    values, errors = _validate_entry(form, description_required=False)
    try:
        values['client_id'] = parse_client_id(form.get('client_id'))
    except ValueError as e:
        errors.append(str(e))
    return values, errors


def validate_expense_form(form):
    return _validate_entry(form, description_required=True)


def validate_signup_form(form, min_password_length):
    errors = []
    name = (form.get('name') or '').strip()
    email = (form.get('email') or '').strip().lower()
    password = form.get('password') or ''

    if not name:
        errors.append("Name is required.")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Name must be at most {MAX_NAME_LENGTH} characters.")
    if not EMAIL_RE.match(email):
        errors.append("Please enter a valid email address.")
    if len(password) < min_password_length:
        errors.append(f"Password must be at least {min_password_length} characters.")

    return {'name': name, 'email': email, 'password': password}, errors
