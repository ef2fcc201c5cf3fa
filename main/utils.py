import json


def is_json_request(request):
    return 'application/json' in request.headers.get('Content-Type', '')


def read_payload(request):
    """JSON body when the client sent one, form data otherwise.

    Returns None when the body is not a JSON object.
    """
    if is_json_request(request):
        try:
            data = json.loads(request.body or b'{}')
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None
    return request.POST.dict()
