import logging

from flask import Flask
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import Config
from routes import ALL_BLUEPRINTS

from models import db
from utils.auth_context import load_current_user
from utils.errors import AppError
from utils.responses import fail


def create_app(config_object=Config, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    for bp in ALL_BLUEPRINTS:
        app.register_blueprint(bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Token signing and decoding
    JWTManager(app)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_error_handlers(app)
    register_cli(app)

    return app

#-------------------------
def register_error_handlers(app):
    @app.errorhandler(AppError)
    def _app_error(exc):
        return fail(exc.status_code, exc.message, exc.details)

    @app.errorhandler(IntegrityError)
    def _integrity_error(exc):
        db.session.rollback()
        app.logger.warning("integrity error: %s", exc.orig)
        return fail(409, "Resource conflicts with an existing record")

    @app.errorhandler(HTTPException)
    def _http_error(exc):
        return fail(exc.code, exc.description)

    @app.errorhandler(Exception)
    def _unhandled(exc):
        db.session.rollback()
        app.logger.exception("unhandled error")
        return fail(500, "Internal server error")

#-------------------------
import click
from models.user import ROLES, User
from utils.seed import seed_space_types

def register_cli(app):
    @app.cli.command("set-role")
    @click.argument("email")
    @click.argument("role", type=click.Choice(ROLES))
    def set_role(email, role):
        """Give a user a role by email (bootstrap the first admin)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        user.role = role
        db.session.commit()
        click.echo(f"{user.email} is now {role}")

    @app.cli.command("seed-space-types")
    def seed_space_types_command():
        """Insert the default space types (idempotent)."""
        added = seed_space_types()
        click.echo(f"{added} space type(s) added")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
