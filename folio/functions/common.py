"""Response helpers shared by the serverless functions."""

from typing import Any, Dict

from fastapi.responses import JSONResponse, Response

# Every function response, including errors and preflight, carries these
CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def preflight_response() -> Response:
    return Response(content=None, status_code=200, headers=CORS_HEADERS)


def json_response(content: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)
