from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from canteen.constants import DEPARTMENTS
from canteen.utils import api_errors


@require_http_methods(['GET'])
@api_errors
def department_list(request):
    """GET /api/departments - static department list for the registration form."""
    return JsonResponse(list(DEPARTMENTS), safe=False)
