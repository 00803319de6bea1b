# fitfusion/__init__.py

from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from config import ActiveConfig

db = SQLAlchemy()
jwt = JWTManager()

from .errors import ApiError, envelope  # noqa: E402
from .services.insight_service import InsightService  # noqa: E402

insights = InsightService()


def create_app(config_class=ActiveConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    insights.init_app(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
        expose_headers=["X-CSRF-TOKEN"],
    )

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        app.logger.info(f"[auth] rejected request: {reason}")
        return envelope(False, "Missing or invalid auth token", None, 401)

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        app.logger.info(f"[auth] invalid token: {reason}")
        return envelope(False, "Invalid auth token", None, 401)

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return envelope(False, "Token has expired", None, 401)

    # -----------------------------
    # Application error handlers
    # -----------------------------
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            app.logger.error(f"[{type(err).__name__}] {err.message}")
        else:
            app.logger.warning(f"[{type(err).__name__}] {err.message}")
        return envelope(False, err.message, err.data, err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return envelope(False, err.description or err.name, None, err.code or 500)

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.user_routes import users_bp
    from .routes.workout_routes import workouts_bp
    from .routes.program_routes import programs_bp
    from .routes.progress_routes import progress_bp
    from .routes.readiness_routes import readiness_bp
    from .routes.food_routes import food_bp
    from .routes.gemini_routes import gemini_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(programs_bp, url_prefix="/api/workouts/programs")
    app.register_blueprint(progress_bp, url_prefix="/api/workouts/progress")
    app.register_blueprint(readiness_bp, url_prefix="/api/workouts/readiness")
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(food_bp, url_prefix="/api/food")
    app.register_blueprint(gemini_bp, url_prefix="/api/gemini")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        db.create_all()

    return app
