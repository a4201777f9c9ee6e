"""Response builder utilities for Lambda responses.

Provides standardized success response construction using orjson for
serialization, in the same shape as the error helpers in errors_module:
    {"statusCode": int, "headers": dict, "body": str}
"""

import orjson


def json_response(
    status_code: int,
    body: dict | list,
    headers: dict[str, str] | None = None,
) -> dict:
    """Build a JSON Lambda response.

    Args:
        status_code: HTTP status code.
        body: Response body (will be serialized with orjson).
        headers: Additional response headers.

    Returns:
        Lambda response dict.
    """
    response_headers = {"Content-Type": "application/json"}
    if headers:
        response_headers.update(headers)
    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": orjson.dumps(body).decode(),
    }
