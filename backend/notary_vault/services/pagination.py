from sqlalchemy.orm import Query


def paginate(query: Query, page_number: int, page_size: int) -> tuple[list, int]:
    """Slice an ordered query into one page.

    The total is counted over the filtered query, before slicing.
    """
    total = query.order_by(None).count()
    items = query.offset((page_number - 1) * page_size).limit(page_size).all()
    return items, total
