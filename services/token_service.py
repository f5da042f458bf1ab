from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from models import db
from models.user import User

TOKEN_SALT = 'access-token'


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def generate_token(user):
    return _serializer().dumps({'sub': user.id, 'role': user.role})


def load_user_from_token(token):
    """Return the user the token was issued to, or None if it is invalid."""
    try:
        payload = _serializer().loads(token, max_age=current_app.config.get('TOKEN_MAX_AGE', 86400))
    except (SignatureExpired, BadSignature):
        return None
    return db.session.get(User, payload.get('sub'))
