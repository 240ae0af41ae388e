from datetime import datetime, timezone
from enum import Enum

from flask_login import UserMixin
from extensions import db


def utcnow():
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class User(db.Model, UserMixin):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100))
    # unique per the signup check only; there is no storage constraint
    enrollment = db.Column(db.String(50), index=True)
    email = db.Column(db.String(100))
    password_hash = db.Column(db.String(256))
    role = db.Column(db.String(10), nullable=False, default=Role.STUDENT.value)

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    def to_public(self):
        return {"name": self.name, "enrollment": self.enrollment, "role": self.role}

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "enrollment": self.enrollment,
            "email": self.email,
            "role": self.role,
        }

    def __repr__(self):
        return f"<User {self.enrollment}>"


class Event(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200))
    date = db.Column(db.String(20))
    description = db.Column(db.Text)

    FIELDS = ("title", "date", "description")

    @classmethod
    def from_payload(cls, payload):
        """Build an event from a request body, dropping unknown keys."""
        return cls(**{key: payload.get(key) for key in cls.FIELDS})

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "description": self.description,
        }


class Registration(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), index=True)
    # not a foreign key: registering for an unknown event id is accepted
    event_id = db.Column(db.Integer, index=True)
    timestamp = db.Column(db.DateTime, default=utcnow)


class SessionRecord(db.Model):
    __tablename__ = "sessions"
    token = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.JSON, nullable=False, default=dict)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
