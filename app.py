from decimal import Decimal, InvalidOperation
from flask import Flask
from flask_wtf.csrf import CSRFProtect
from config import Config, SUPPORTED_CURRENCIES
from routes.auth import auth_bp
from routes.dashboard import dashboard_bp
from routes.clients import clients_bp
from routes.income import income_bp
from routes.expenses import expenses_bp
from routes.export import export_bp

csrf = CSRFProtect()

CURRENCY_SYMBOLS = {'USD': '$', 'EUR': '€', 'GBP': '£'}

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'X-XSS-Protection': '1; mode=block',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        import secrets
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    currency = app.config.get("CURRENCY", "USD")
    if currency not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency {currency!r}, expected one of {', '.join(SUPPORTED_CURRENCIES)}")

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    csrf.init_app(app)
    config_class.init_db(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(income_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(export_bp)

    app.jinja_env.filters['money'] = money_filter

    @app.after_request
    def set_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    app.logger.info("Finance tracker started (currency=%s)", currency)
    return app

def money_filter(value, currency='USD'):
    try:
        amount = Decimal(str(value if value is not None else 0))
    except (InvalidOperation, ValueError):
        amount = Decimal('0')
    sign = '-' if amount < 0 else ''
    return f"{sign}{CURRENCY_SYMBOLS.get(currency, '')}{abs(amount):,.2f}"


if __name__ == "__main__":
    create_app().run()
