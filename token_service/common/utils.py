from typing import Any, Dict, Optional
from fastapi.responses import JSONResponse


def build_error(message: str) -> Dict[str, Any]:
    return {"error": message}


def json_error(content: Dict[str, Any], status_code: int = 500, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers)
