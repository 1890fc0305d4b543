from rest_framework.views import exception_handler


def api_exception_handler(exc, context):
    """
    Wraps DRF's default handler so single-message errors come back as
    ``{"error": "...", "code": "..."}``. Field validation errors keep
    DRF's per-field shape.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and list(data.keys()) == ['detail']:
        detail = data['detail']
        response.data = {
            "error": str(detail),
            "code": getattr(detail, 'code', 'error'),
        }
    return response
