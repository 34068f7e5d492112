"""
API pagination classes.
"""

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Default paging for WIRs, rosters, attachments and audit logs (?page_size=N)."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 1000


class LargeResultsSetPagination(PageNumberPagination):
    """
    Paging for BOQ and breakdown lists.

    Item pickers load these whole, so a page holds a full contract BOQ.
    """
    page_size = 500
    page_size_query_param = 'page_size'
    max_page_size = 5000
