# fintrack/backend/app.py
import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from . import categories, db, transactions
from .auth import auth_bp, jwt
from .config import Config, cors_origins
from .errors import ApiError

# ---------------- Logging ----------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("fintrack-backend")


# ---------------- Flask App Factory ----------------
def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/api/*": {"origins": cors_origins(app.config)}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(transactions.bp)
    app.register_blueprint(categories.bp)

    # Initialize DB
    db.init_app(app)
    db.init_db(app.config["DB_PATH"], seed=app.config.get("SEED_DEFAULT_CATEGORIES", True))
    logger.info(f"Database initialized at {os.path.abspath(app.config['DB_PATH'])}")

    # ---------------- Error handling ----------------
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            logger.exception(f"{request.method} {request.path} failed: {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"message": "Internal server error"}), 500

    @app.after_request
    def log_request(response):
        logger.debug(f"{request.method} {request.path} {response.status_code}")
        return response

    # ---------------- Core Endpoints ----------------
    @app.route('/')
    def root():
        return jsonify({"message": "API is running..."})

    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    return app


# ---------------- Run ----------------
if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=int(os.environ.get("PORT", 5000)))
