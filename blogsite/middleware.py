import logging
import time

from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


class QueryCounter:
    """Database execute wrapper that counts queries and the time spent on them."""

    def __init__(self):
        self.count = 0
        self.duration = 0.0

    def __call__(self, execute, sql, params, many, context):
        start = time.perf_counter()
        try:
            return execute(sql, params, many, context)
        finally:
            self.count += 1
            self.duration += time.perf_counter() - start


class RequestTimingMiddleware:
    """
    Logs per request timing and the number of database queries issued.

    Only active with DEBUG on; it is the quickest way to spot a listing
    endpoint that started issuing one query per item.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not settings.DEBUG:
            return self.get_response(request)

        counter = QueryCounter()
        start_time = time.perf_counter()
        with connection.execute_wrapper(counter):
            response = self.get_response(request)
        total_time = time.perf_counter() - start_time

        logger.info(
            f"Request: {request.method} {request.path} "
            f"status={response.status_code} "
            f"total={total_time:.3f}s db={counter.duration:.3f}s "
            f"queries={counter.count}"
        )

        return response
