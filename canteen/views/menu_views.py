"""Menu items: list/create, detail/update/delete, and printable QR codes. Function-based."""
import logging

from django.db.models import Q
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.csrf import csrf_exempt

from canteen.constants import VALID_CATEGORIES
from canteen.models import MenuItem
from canteen.qr import generate_menu_item_qr_png
from canteen.utils import (
    ApiError,
    api_errors,
    is_blank,
    is_positive_number,
    json_error,
    parse_id,
    parse_json_body,
    serialize_value,
)

logger = logging.getLogger(__name__)

INVALID_PRICE_MSG = 'Price must be a positive number'
INVALID_CATEGORY_MSG = 'Category must be snacks, beverages, or sweets'


def _menu_item_to_dict(m):
    return {
        'id': m.id,
        'name': m.name,
        'description': m.description,
        'price': m.price,
        'category': m.category,
        'imageUrl': m.image_url,
        'available': m.available,
        'createdAt': serialize_value(m.created_at),
    }


def _get_menu_item(pk):
    """Resolve a path id to a MenuItem or raise INVALID_ID / NOT_FOUND."""
    menu_item_id = parse_id(pk)
    if menu_item_id is None:
        raise ApiError('Valid menu item ID is required', 'INVALID_ID', 400)
    item = MenuItem.objects.filter(pk=menu_item_id).first()
    if item is None:
        raise ApiError('Menu item not found', 'NOT_FOUND', 404)
    return item


def _menu_list(request):
    qs = MenuItem.objects.all()
    category = request.GET.get('category')
    if category:
        qs = qs.filter(category=category)
    available = request.GET.get('available')
    if available is not None:
        qs = qs.filter(available=(available == 'true'))
    search = request.GET.get('search')
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))
    return JsonResponse([_menu_item_to_dict(m) for m in qs], safe=False)


def _menu_create(request):
    body = parse_json_body(request)
    name = body.get('name')
    price = body.get('price')
    category = body.get('category')
    if is_blank(name) or 'price' not in body or is_blank(category):
        return json_error('Name, price and category are required', 'MISSING_REQUIRED_FIELDS', 400)
    if not is_positive_number(price):
        return json_error(INVALID_PRICE_MSG, 'INVALID_PRICE', 400)
    if category not in VALID_CATEGORIES:
        return json_error(INVALID_CATEGORY_MSG, 'INVALID_CATEGORY', 400)
    item = MenuItem.objects.create(
        name=str(name).strip(),
        description=body.get('description') or None,
        price=price,
        category=category,
        image_url=body.get('imageUrl') or None,
        available=bool(body['available']) if 'available' in body else True,
    )
    logger.info('Menu item %s created: %s', item.pk, item.name)
    return JsonResponse(_menu_item_to_dict(item), status=201)


@csrf_exempt
@require_http_methods(['GET', 'POST'])
@api_errors
def menu_collection(request):
    """
    GET /api/menu - list; filters: category, available ("true"/"false"), search (name or description).
    POST /api/menu - create. Required: name, price (> 0), category. Optional: description, imageUrl, available.
    """
    if request.method == 'POST':
        return _menu_create(request)
    return _menu_list(request)


def _menu_update(request, pk):
    if parse_id(pk) is None:
        raise ApiError('Valid menu item ID is required', 'INVALID_ID', 400)
    body = parse_json_body(request)
    if 'price' in body and not is_positive_number(body['price']):
        return json_error(INVALID_PRICE_MSG, 'INVALID_PRICE', 400)
    if 'category' in body and body['category'] not in VALID_CATEGORIES:
        return json_error(INVALID_CATEGORY_MSG, 'INVALID_CATEGORY', 400)
    item = _get_menu_item(pk)
    if 'name' in body:
        item.name = str(body['name']).strip()
    if 'description' in body:
        description = body['description']
        item.description = str(description).strip() if description is not None else None
    if 'price' in body:
        item.price = body['price']
    if 'category' in body:
        item.category = body['category']
    if 'imageUrl' in body:
        item.image_url = body['imageUrl']
    if 'available' in body:
        item.available = bool(body['available'])
    item.save()
    return JsonResponse(_menu_item_to_dict(item))


def _menu_delete(request, pk):
    item = _get_menu_item(pk)
    item.delete()
    logger.info('Menu item %s deleted', pk)
    return JsonResponse({'message': 'Menu item deleted successfully', 'deletedId': pk})


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@api_errors
def menu_detail(request, pk):
    """GET/PUT/DELETE /api/menu/<id>. PUT updates only the fields present in the body."""
    if request.method == 'PUT':
        return _menu_update(request, pk)
    if request.method == 'DELETE':
        return _menu_delete(request, pk)
    return JsonResponse(_menu_item_to_dict(_get_menu_item(pk)))


@require_http_methods(['GET'])
@api_errors
def menu_item_qr(request, pk):
    """GET /api/menu/<id>/qr - PNG QR code read by the scanner page."""
    item = _get_menu_item(pk)
    png_bytes = generate_menu_item_qr_png(item)
    response = HttpResponse(png_bytes, content_type='image/png')
    response['Content-Disposition'] = f'inline; filename="menu-item-{item.pk}.png"'
    return response
