from flask import Flask, request
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_cors import CORS
from dotenv import load_dotenv
import logging
import os

logger = logging.getLogger(__name__)

login_manager = LoginManager()
csrf = CSRFProtect()

# Config keys read from the environment at startup
ENV_KEYS = (
    'PAYFAST_MERCHANT_ID',
    'PAYFAST_MERCHANT_KEY',
    'PAYFAST_PASSPHRASE',
    'PAYFAST_SANDBOX',
    'PAYFAST_RETURN_URL',
    'PAYFAST_CANCEL_URL',
    'PAYFAST_NOTIFY_URL',
    'STRIPE_SECRET_KEY',
    'STRIPE_PRICE_ID_STARTER',
    'STRIPE_PRICE_ID_PROFESSIONAL',
    'STRIPE_PRICE_ID_BUSINESS',
    'STRIPE_API_BASE',
)


def create_app(config=None, principal_loader=None):
    """
    Application factory.

    Args:
        config (dict, optional): Overrides applied after environment loading
        principal_loader (callable, optional): ``loader(user_id) -> Principal | None``
            supplied by the auth layer; registered as the Flask-Login user loader
    """
    # Load environment variables from .env file
    load_dotenv()

    app = Flask(__name__)

    # Enable CORS for the single-page client calling the JSON API
    CORS(app,
         resources={r"/api/*": {"origins": os.getenv('CORS_ORIGINS', '*')}},
         allow_headers=["Content-Type", "X-Request-ID", "X-CSRFToken"],
         methods=["GET", "POST", "OPTIONS"],
         supports_credentials=False)

    # configuration
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'your-default-secret')
    for key in ENV_KEYS:
        app.config[key] = os.getenv(key)
    app.config['CHECKOUT_HOST'] = os.getenv('CHECKOUT_HOST', '').rstrip('/') or None
    app.config['PRODUCT_NAME'] = os.getenv('PRODUCT_NAME', 'EngageHub')
    app.config['PAYMENT_REFERENCE_PREFIX'] = os.getenv('PAYMENT_REFERENCE_PREFIX', 'EH')
    app.config['DEFAULT_TRIAL_DAYS'] = int(os.getenv('DEFAULT_TRIAL_DAYS', '14'))
    app.config['STRIPE_TIMEOUT'] = int(os.getenv('STRIPE_TIMEOUT', '10'))
    if config:
        app.config.update(config)

    # Init extensions
    login_manager.init_app(app)
    csrf.init_app(app)

    if principal_loader is not None:
        login_manager.user_loader(principal_loader)
    else:
        # No auth layer wired in: every request is anonymous
        login_manager.user_loader(lambda user_id: None)

    @login_manager.unauthorized_handler
    def custom_unauthorized():
        from flask import render_template
        from checkoutgw.api.errors import authentication_error

        if request.path.startswith('/api/'):
            return authentication_error()
        return render_template('payment/error.html', message='Please sign in to continue.'), 401

    from checkoutgw.middleware import init_request_tracking
    init_request_tracking(app)

    # Register blueprints
    from checkoutgw.routes import checkout_bp, checkout_api

    app.register_blueprint(checkout_bp)
    app.register_blueprint(checkout_api)

    # The JSON API is called by the SPA with a JSON body, not a form
    csrf.exempt(checkout_api)

    if not app.config.get('PAYFAST_MERCHANT_ID') or not app.config.get('PAYFAST_MERCHANT_KEY'):
        logger.warning("PayFast credentials not configured; PayFast checkouts will be refused")

    return app
