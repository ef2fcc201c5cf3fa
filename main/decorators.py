from functools import wraps

from django.http import JsonResponse

from .models import is_admin_user


def json_login_required(view_func):
    """Like ``login_required`` but answers API callers with a 401 JSON body."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'status': 'error', 'message': 'Not authenticated'}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped


def admin_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'status': 'error', 'message': 'Not authenticated'}, status=401)
        if not is_admin_user(request.user):
            return JsonResponse({'status': 'error', 'message': 'Forbidden. Admin access required.'}, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped
