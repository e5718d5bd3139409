"""Flask application factory."""
from flask import Flask, request, jsonify
from flask_wtf.csrf import CSRFProtect, CSRFError
from storefront.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Initialize CSRF protection
    CSRFProtect(app)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        return jsonify({
            'status': 'error',
            'error': 'csrf',
            'message': 'Your session has expired. Reload the page and try again.'
        }), 400

    # Error tracking in production
    if os.getenv('SENTRY_DSN') and (app.config.get('ENV') == 'production' or os.getenv('FLASK_ENV') == 'production'):
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            profiles_sample_rate=0.1,
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Redis cache for catalog reads
    from storefront.services.cache_service import init_cache
    init_cache(app)

    # Prometheus request instrumentation
    from storefront.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for=1,
            x_proto=1,
            x_host=1,
            x_port=1,
            x_prefix=0
        )

    # Initialize database
    init_db(app)

    # Jinja filters for formatting amounts and dates
    from storefront.utils.formatters import money_bd, num_bd, date_bd, datetime_bd
    app.jinja_env.filters['money_bd'] = money_bd
    app.jinja_env.filters['num_bd'] = num_bd
    app.jinja_env.filters['date_bd'] = date_bd
    app.jinja_env.filters['datetime_bd'] = datetime_bd

    # Shopper session state: loaded into g.shop, written back after each request
    from storefront.middleware import load_shop_state, save_shop_state

    @app.before_request
    def before_request_handler():
        load_shop_state()

    @app.after_request
    def after_request_handler(response):
        return save_shop_state(response)

    # Error Handlers
    from storefront.exceptions import StorefrontError

    @app.errorhandler(StorefrontError)
    def handle_storefront_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"StorefrontError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"StorefrontError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception on {request.path}: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from storefront.blueprints.main import main_bp
    from storefront.blueprints.shop import shop_bp
    from storefront.blueprints.checkout import checkout_bp
    from storefront.blueprints.invoice import invoice_bp
    from storefront.blueprints.admin import admin_bp
    from storefront.blueprints.metrics import metrics_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(shop_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(invoice_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(metrics_bp)

    # CLI commands
    from storefront.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
