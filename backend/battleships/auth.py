"""Account registration and login.

Issues signed tokens for the frontend to keep. Rooms do not check them:
socket sessions are anonymous and identified only by their connection id.
"""

from datetime import datetime, timedelta, timezone

import jwt
from flask import Blueprint, current_app, jsonify, request
from flask_login import login_user
from sqlalchemy.exc import SQLAlchemyError

from battleships import db
from battleships.models import User

auth = Blueprint('auth', __name__)


def generate_token(user: User) -> str:
    expires = datetime.now(timezone.utc) + timedelta(days=current_app.config.get('JWT_EXPIRES_DAYS', 7))
    payload = {'id': user.id, 'username': user.username, 'exp': expires}
    return jwt.encode(payload, current_app.config['JWT_SECRET'], algorithm='HS256')


def verify_token(token: str) -> dict:
    """Decode a token issued by ``generate_token``.

    Raises ``jwt.InvalidTokenError`` (or ``jwt.ExpiredSignatureError``) when
    the token is not valid.
    """
    return jwt.decode(token, current_app.config['JWT_SECRET'], algorithms=['HS256'])


def _token_response(user: User, status: int = 200):
    return jsonify({'token': generate_token(user), 'user': user.to_dict()}), status


@auth.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return jsonify({'error': 'Missing username or password.'}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists.'}), 400

    user = User(username=username)
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(f"[auth-register] failed user={username}")
        return jsonify({'error': 'Registration failed.'}), 500

    login_user(user)
    current_app.logger.info(f"[auth-register] user={user.id} username={username}")
    return _token_response(user)


@auth.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=data.get('username')).first()
    if not user or not user.check_password(data.get('password') or ''):
        return jsonify({'error': 'Invalid credentials.'}), 401

    login_user(user)
    return _token_response(user)
