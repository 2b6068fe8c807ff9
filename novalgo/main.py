import os

from flask import Flask
from marshmallow import ValidationError

from .config import CONFIGS
from .extensions import db, migrate, jwt, ma, cors, bcrypt


def create_app(config_name=None, overrides=None):
    app = Flask(__name__, instance_relative_config=False)
    env = config_name or os.getenv("FLASK_ENV", "development")
    app.config.from_object(CONFIGS.get(env, CONFIGS["development"]))
    app.config.update(overrides or {})
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",")]
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )
    bcrypt.init_app(app)

    # models must be imported before create_all / migrations see the metadata
    from novalgo.models import user, profile, wallet, transaction, deposit, withdrawal, investment, referral  # noqa: F401

    # register blueprints
    from novalgo.routes.auth_routes import bp as auth_bp
    from novalgo.routes.profile_routes import bp as profile_bp
    from novalgo.routes.wallet_routes import bp as wallet_bp
    from novalgo.routes.deposit_routes import bp as deposit_bp
    from novalgo.routes.withdrawal_routes import bp as withdrawal_bp
    from novalgo.routes.investment_routes import bp as investment_bp
    from novalgo.routes.referral_routes import bp as referral_bp
    from novalgo.routes.admin_routes import bp as admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(wallet_bp)
    app.register_blueprint(deposit_bp)
    app.register_blueprint(withdrawal_bp)
    app.register_blueprint(investment_bp)
    app.register_blueprint(referral_bp)
    app.register_blueprint(admin_bp)

    @app.route("/health")
    def health():
        return {"status": "ok"}

    # error handlers to match required error format
    from novalgo.utils.exceptions import ServiceError
    from novalgo.utils.response_formatter import error_response, service_error_response

    @app.errorhandler(ServiceError)
    def service_error(e):
        if e.status >= 500:
            app.logger.warning("%s: %s %s", e.code, e.message, e.details)
        return service_error_response(e)

    @app.errorhandler(ValidationError)
    def validation_error(e):
        return error_response("VALIDATION_ERROR", "Invalid request data", e.messages, status=422)

    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response("UNAUTHORIZED", reason, status=401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response("UNAUTHORIZED", reason, status=401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response("TOKEN_EXPIRED", "Token has expired", status=401)

    @app.errorhandler(400)
    def bad_request(e):
        return error_response("BAD_REQUEST", str(e), status=400)

    @app.errorhandler(401)
    def unauthorized(e):
        return error_response("UNAUTHORIZED", str(e), status=401)

    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", status=404)

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Unhandled error: %s", e)
        return error_response("SERVER_ERROR", "Internal server error", status=500)

    return app
