from flask import request

MAX_PAGE_SIZE = 100


def page_args(default_limit=20):
    """Read ``page``/``limit`` from the query string, clamped to sane bounds."""
    try:
        page = int(request.args.get("page", 1))
        limit = int(request.args.get("limit", default_limit))
    except (TypeError, ValueError):
        page, limit = 1, default_limit
    return max(page, 1), min(max(limit, 1), MAX_PAGE_SIZE)


def paginate_query(query, page, limit):
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    total_pages = (total + limit - 1) // limit
    return items, {"total": total, "page": page, "limit": limit, "total_pages": total_pages}
