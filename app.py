from flask import Flask, Blueprint, Response, abort, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import login_user, logout_user, current_user

from config import Config
from errors import (
    ApiError,
    AlreadyRegistered,
    DuplicateEnrollment,
    InvalidCredentials,
    LoginRequired,
    NotAuthorized,
    NotLoggedIn,
)
from extensions import db, login_manager, cors
from models import User, Event, Registration, Role
from session_store import SessionStore, ServerSideSessionInterface


api = Blueprint("api", __name__)


# =====================
# APP FACTORY
# =====================
def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    login_manager.init_app(app)
    cors.init_app(
        app,
        origins=[app.config["CORS_ORIGIN"]],
        supports_credentials=True,
    )

    store = SessionStore(db)
    app.extensions["session_store"] = store
    app.session_interface = ServerSideSessionInterface(store)

    app.register_blueprint(api)
    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app


# =====================
# LOGIN MANAGER
# =====================
@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def _payload():
    return request.get_json(silent=True) or {}


# =====================
# AUTH ROUTES
# =====================
@api.route("/api/signup", methods=["POST"])
def signup():
    data = _payload()
    enrollment = data.get("enrollment")

    if User.query.filter_by(enrollment=enrollment).first():
        raise DuplicateEnrollment()

    user = User(
        name=data.get("name"),
        enrollment=enrollment,
        email=data.get("email"),
        password_hash=generate_password_hash(data.get("password")),
        role=Role.STUDENT.value,
    )
    db.session.add(user)
    db.session.commit()

    login_user(user)
    current_app.logger.info("New signup: %s", user.enrollment)
    return jsonify(message="ok", user=user.to_public())


@api.route("/api/login", methods=["POST"])
def login():
    data = _payload()
    user = User.query.filter_by(enrollment=data.get("enrollment")).first()

    # unknown enrollment and wrong password must look the same to the caller
    if not user:
        current_app.logger.warning("Login failed for unknown enrollment")
        raise InvalidCredentials()
    if not check_password_hash(user.password_hash, data.get("password")):
        current_app.logger.warning("Login failed for %s", user.enrollment)
        raise InvalidCredentials()

    login_user(user)
    current_app.logger.info("Login: %s", user.enrollment)
    return jsonify(message="ok", user=user.to_public())


@api.route("/api/logout", methods=["POST"])
def logout():
    enrollment = current_user.enrollment if current_user.is_authenticated else None
    logout_user()
    session.clear()
    if enrollment:
        current_app.logger.info("Logout: %s", enrollment)
    return jsonify(message="logged out")


@api.route("/api/me")
def me():
    if not current_user.is_authenticated:
        return jsonify(user=None)
    return jsonify(user=current_user.to_dict())


# =====================
# EVENTS
# =====================
@api.route("/api/events")
def list_events():
    limit = current_app.config["EVENTS_LIMIT"]
    events = Event.query.order_by(Event.id).limit(limit).all()
    return jsonify([event.to_dict() for event in events])


@api.route("/api/events", methods=["POST"])
def create_event():
    if not current_user.is_authenticated:
        raise NotLoggedIn()
    if not current_user.is_admin:
        raise NotAuthorized()

    event = Event.from_payload(_payload())
    db.session.add(event)
    db.session.commit()

    current_app.logger.info("Event %s created by %s", event.id, current_user.enrollment)
    return jsonify(event.to_dict())


# =====================
# EVENT REGISTRATION
# =====================
@api.route("/api/events/<int:event_id>/register", methods=["POST"])
def register_event(event_id):
    if not current_user.is_authenticated:
        raise LoginRequired()

    existing = Registration.query.filter_by(
        user_id=current_user.id,
        event_id=event_id
    ).first()

    if existing:
        raise AlreadyRegistered()

    registration = Registration(user_id=current_user.id, event_id=event_id)
    db.session.add(registration)
    db.session.commit()

    current_app.logger.info("%s registered for event %s", current_user.enrollment, event_id)
    return jsonify(message="registered")


# =====================
# SEED (DEV ONLY)
# =====================
SAMPLE_EVENTS = [
    {"title": "Coding Hackathon", "date": "2025-11-01", "description": "Team-based competition"},
    {"title": "AI Talk", "date": "2025-12-05", "description": "Guest lecture on AI"},
]


def seed_database():
    if not User.query.filter_by(enrollment="ADMIN001").first():
        db.session.add(User(
            name="Admin",
            enrollment="ADMIN001",
            email="admin@college.edu",
            password_hash=generate_password_hash("adminpass"),
            role=Role.ADMIN.value,
        ))

    if Event.query.count() == 0:
        db.session.add_all([Event.from_payload(sample) for sample in SAMPLE_EVENTS])

    db.session.commit()


@api.route("/api/seed")
def seed():
    if not current_app.config["SEED_ENABLED"]:
        abort(404)
    seed_database()
    current_app.logger.info("Database seeded")
    return jsonify(message="seeded")


@api.route("/")
def index():
    return Response("CampusConnect backend is running!", mimetype="text/plain")


# =====================
# ERRORS
# =====================
def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        if isinstance(err, HTTPException):
            return err
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        db.session.rollback()
        return jsonify(error="Something went wrong!"), 500


# =====================
# CLI
# =====================
def register_commands(app):
    @app.cli.command("seed")
    def seed_command():
        """Create the demo admin account and sample events."""
        seed_database()
        print("seeded")

    @app.cli.command("purge-sessions")
    def purge_sessions_command():
        """Delete expired session records."""
        removed = app.extensions["session_store"].purge_expired()
        print(f"removed {removed} expired sessions")


# =====================
# RUN
# =====================
if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"])
