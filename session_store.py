"""Server-side sessions.

The browser only ever holds a signed opaque token; the session contents
(the logged-in user id written by Flask-Login) live in the ``sessions``
table and expire a fixed lifetime after their last write.
"""

import secrets

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

from extensions import db
from models import SessionRecord, utcnow

SIGNER_SALT = "campusconnect.session"


class SessionStore:
    """Keyed store mapping a session token to its data."""

    def __init__(self, database=db):
        self.db = database

    def new_token(self):
        return secrets.token_urlsafe(32)

    def load(self, token):
        record = self.db.session.get(SessionRecord, token)
        if record is None:
            return None
        if record.expires_at <= utcnow():
            self.db.session.delete(record)
            self.db.session.commit()
            return None
        return dict(record.data or {})

    def save(self, token, data, lifetime):
        record = self.db.session.get(SessionRecord, token)
        if record is None:
            record = SessionRecord(token=token)
            self.db.session.add(record)
        record.data = dict(data)
        record.expires_at = utcnow() + lifetime
        self.db.session.commit()
        return record.expires_at

    def destroy(self, token):
        if not token:
            return
        SessionRecord.query.filter_by(token=token).delete()
        self.db.session.commit()

    def purge_expired(self):
        count = SessionRecord.query.filter(
            SessionRecord.expires_at <= utcnow()
        ).delete()
        self.db.session.commit()
        return count


class ServerSideSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False


class ServerSideSessionInterface(SessionInterface):
    def __init__(self, store):
        self.store = store

    def _signer(self, app):
        return Signer(app.secret_key, salt=SIGNER_SALT)

    def _unsign(self, app, cookie):
        try:
            return self._signer(app).unsign(cookie).decode("utf-8")
        except BadSignature:
            return None

    def open_session(self, app, request):
        cookie = request.cookies.get(self.get_cookie_name(app))
        if cookie:
            sid = self._unsign(app, cookie)
            if sid:
                data = self.store.load(sid)
                if data is not None:
                    return ServerSideSession(data, sid=sid)
        return ServerSideSession(sid=self.store.new_token(), new=True)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.accessed:
            response.vary.add("Cookie")

        if not session:
            if session.modified:
                self.store.destroy(session.sid)
                response.delete_cookie(name, domain=domain, path=path)
            return

        if not session.modified:
            return

        expires = self.store.save(session.sid, session, app.permanent_session_lifetime)
        response.set_cookie(
            name,
            self._signer(app).sign(session.sid).decode("utf-8"),
            expires=expires,
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )
