import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///battleships.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Auth tokens (issued on register/login, not required by rooms)
    JWT_SECRET = os.environ.get('JWT_SECRET') or SECRET_KEY
    JWT_EXPIRES_DAYS = int(os.environ.get('JWT_EXPIRES_DAYS', '7'))
    # Room ids are short and typeable
    ROOM_ID_LENGTH = int(os.environ.get('ROOM_ID_LENGTH', '6'))
    # Stale room sweep (seconds)
    ROOM_SWEEP_INTERVAL_SEC = int(os.environ.get('ROOM_SWEEP_INTERVAL_SEC', '300'))
    ROOM_MAX_AGE_SEC = int(os.environ.get('ROOM_MAX_AGE_SEC', '3600'))
    # Production frontend origin, added to the CORS allow list
    CLIENT_URL = os.environ.get('CLIENT_URL') or 'https://battleships-clone-frontend.vercel.app'
