"""Session gate shared by every ledger blueprint."""

from functools import wraps
from flask import session, redirect, url_for

LOGIN_ENDPOINT = 'auth.login'

def login_required(fn):
    """Send visitors without a ``user_id`` in the session to the login page."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if session.get('user_id') is None:
            return redirect(url_for(LOGIN_ENDPOINT))
        return fn(*args, **kwargs)
    return wrapper
