import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your_secret_key_here'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///inventory.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BABEL_DEFAULT_LOCALE = os.environ.get('BABEL_DEFAULT_LOCALE') or 'en'
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    TOKEN_MAX_AGE = int(os.environ.get('TOKEN_MAX_AGE') or 86400)
    DEFAULT_PAGE_SIZE = 10
    LOW_STOCK_THRESHOLD = 10
    # recompute: total = SUM(quantity * unit_price); accumulate: apply line deltas
    ORDER_TOTAL_STRATEGY = os.environ.get('ORDER_TOTAL_STRATEGY') or 'recompute'

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'WARNING'
