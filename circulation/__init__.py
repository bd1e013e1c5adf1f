from flask import Flask, jsonify

from circulation.config import Config, LibrarySettings
from circulation.extensions import db, migrate, jwt


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # models must be imported before migrate/create_all see the metadata
    from circulation import models  # noqa: F401

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    app.extensions["library_settings"] = LibrarySettings.from_config(app.config)

    from circulation.controllers.book_controller import book_bp
    from circulation.controllers.fine_controller import fine_bp
    from circulation.controllers.loan_controller import loan_bp
    app.register_blueprint(book_bp, url_prefix="/library/books")
    app.register_blueprint(loan_bp, url_prefix="/library/loans")
    app.register_blueprint(fine_bp, url_prefix="/library/fines")

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    app.logger.info(
        f"[app] circulation ready: loan_period={app.config['LIBRARY_LOAN_PERIOD_DAYS']}d "
        f"max_renewals={app.config['LIBRARY_MAX_RENEWALS']}"
    )
    return app
