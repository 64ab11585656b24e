from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    state = request.app.state
    statements = getattr(state, "statements", None)
    ocr = getattr(state, "ocr", None)
    return {
        "status": "ok",
        "ai": bool(statements and statements.ai_available),
        "ocr": bool(ocr and ocr.configured),
    }
