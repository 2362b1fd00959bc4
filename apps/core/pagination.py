from rest_framework import serializers


DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PageQuerySerializer(serializers.Serializer):
    """
    Validate ``page``/``limit`` query parameters.

    Query Parameters:
        page (int): 1-based page number
        limit (int): Page size (max 100)
    """

    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        required=False,
        default=DEFAULT_PAGE_SIZE
    )


def build_pagination(*, total, page, limit):
    """Return the ``pagination`` block shared by all list endpoints."""
    total_pages = (total + limit - 1) // limit if total else 0
    return {
        'total': total,
        'page': page,
        'limit': limit,
        'totalPages': total_pages,
    }
