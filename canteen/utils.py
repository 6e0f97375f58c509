"""
Shared helpers for the JSON API: error responses, body parsing, id parsing,
value serialization and the handler error boundary.
"""
import json
import logging
import re
from datetime import date, datetime
from functools import wraps

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


class ApiError(Exception):
    """Error with a machine-readable code, converted to {error, code} by api_errors."""

    def __init__(self, message, code=None, status=400, **extra):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.extra = extra

    def to_response(self):
        return json_error(self.message, self.code, self.status, **self.extra)


def json_error(message, code=None, status=400, **extra):
    body = {'error': message}
    if code:
        body['code'] = code
    body.update(extra)
    return JsonResponse(body, status=status)


def parse_json_body(request):
    """Return the decoded JSON body (empty dict when no body). Raise ApiError on malformed JSON."""
    if not request.body:
        return {}
    try:
        body = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ApiError('Invalid JSON', 'INVALID_JSON')
    if not isinstance(body, dict):
        raise ApiError('Invalid JSON', 'INVALID_JSON')
    return body


def parse_id(value):
    """Leading-integer parse of a path or query value; None when it has no leading digits."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else None
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def parse_body_id(value):
    """Id from a JSON body: an int or a string of digits. Anything else matches no row (None)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def is_blank(value):
    """True for values a JSON client would treat as absent: null, false, 0, empty string."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def is_positive_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0


def serialize_value(v):
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return v


def api_errors(view_func):
    """
    Error boundary for API views: ApiError becomes its JSON body, anything else is logged
    and returned as a 500 {"error": "Internal server error: <message>"}.
    """
    @wraps(view_func)
    def wrapped(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ApiError as e:
            return e.to_response()
        except Exception as e:
            logger.exception('%s %s failed', request.method, request.path)
            if getattr(settings, 'EXPOSE_INTERNAL_ERRORS', True):
                return JsonResponse({'error': 'Internal server error: ' + str(e)}, status=500)
            return JsonResponse({'error': 'Internal server error'}, status=500)
    return wrapped
