"""Profile completion for a user (name, designation, department, phone)."""
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.csrf import csrf_exempt

from canteen import services
from canteen.models import User
from canteen.utils import ApiError, parse_id, parse_json_body
from canteen.views.auth_views import _user_to_dict

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(['PATCH'])
def user_update(request, pk):
    """PATCH /api/users/<id> - empty values leave the stored field unchanged."""
    try:
        body = parse_json_body(request)
        user_id = parse_id(pk)
        user = User.objects.filter(pk=user_id).first() if user_id is not None else None
        if user is None:
            return JsonResponse({'error': 'User not found'}, status=404)
        user = services.update_profile(user, body)
        return JsonResponse(_user_to_dict(user))
    except ApiError as e:
        return e.to_response()
    except Exception:
        logger.exception('Error updating user %s', pk)
        return JsonResponse({'error': 'Failed to update user'}, status=500)
