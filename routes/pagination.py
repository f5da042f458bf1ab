import math

from flask import current_app, request


def page_args():
    """Read ``page``/``limit`` from the query string; bad values fall back to defaults."""
    page = request.args.get('page', type=int) or 1
    limit = request.args.get('limit', type=int) or current_app.config.get('DEFAULT_PAGE_SIZE', 10)
    page = max(page, 1)
    limit = max(limit, 1)
    return page, limit, (page - 1) * limit


def last_page(total_count, limit):
    return max(math.ceil(total_count / limit), 1)
