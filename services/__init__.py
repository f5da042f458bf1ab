import math
from contextlib import contextmanager
from datetime import datetime

from flask import current_app
from sqlalchemy import select

from models import db
from services.errors import InvalidRequestError

DEFAULT_SKIP = 0
DEFAULT_TAKE = 10


@contextmanager
def atomic():
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def get_for_update(model, entity_id):
    # FOR UPDATE is dropped by dialects without row locks (sqlite)
    if entity_id is None:
        return None
    return db.session.execute(
        select(model)
        .where(model.id == entity_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def to_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f'"{field}" must be an integer')


def to_float(value, field):
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f'"{field}" must be a number')
    if not math.isfinite(result):
        raise InvalidRequestError(f'"{field}" must be a number')
    return result


def parse_date(value, field='date'):
    if isinstance(value, datetime):
        return value
    if not value:
        raise InvalidRequestError(f'"{field}" is required')
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidRequestError(f'"{field}" must be an ISO-8601 date')
    # stored naive, in UTC
    if parsed.tzinfo is not None:
        parsed = (parsed - parsed.utcoffset()).replace(tzinfo=None)
    return parsed


def page_window(skip=None, take=None):
    skip = DEFAULT_SKIP if skip in (None, '') else to_int(skip, 'skip')
    if take in (None, ''):
        take = current_app.config.get('DEFAULT_PAGE_SIZE', DEFAULT_TAKE)
    else:
        take = to_int(take, 'take')
    if skip < 0 or take < 0:
        raise InvalidRequestError('"skip" and "take" must not be negative')
    return skip, take
