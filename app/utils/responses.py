# app/utils/responses.py

def format_response(success: bool, data=None, message: str = ""):
    return {
        "success": success,
        "data": data,
        "message": message,
    }

def format_error_response(exc):
    detail = getattr(exc, "detail", None)
    if detail is None:
        detail = str(exc)
    return {"error": detail}
