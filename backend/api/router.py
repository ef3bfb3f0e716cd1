from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from config import settings
from models.requests import TextAnalyzeRequest
from models.responses import AnalysisResponse
from models.schemas import AnalysisKind
from services import determinism, fish_analyzer

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/analyze", response_model=AnalysisResponse)
@limiter.limit("10/minute")
async def analyze(
    request: Request,
    image: UploadFile = File(...),
    analysis_type: str = Form(AnalysisKind.FRESHNESS.value),
):
    try:
        kind = AnalysisKind(analysis_type)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail="analysis_type must be one of: freshness, species, both",
        )

    # Validate file type
    if image.content_type not in settings.allowed_image_types:
        raise HTTPException(
            status_code=400,
            detail=f"Only {', '.join(settings.allowed_image_types)} images are accepted",
        )

    # Read and validate size
    content = await image.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded image is empty")

    return await fish_analyzer.analyze_image(content, image.content_type, kind)


@router.post("/analyze/text", response_model=AnalysisResponse)
@limiter.limit("10/minute")
async def analyze_text(request: Request, body: TextAnalyzeRequest):
    parsed = fish_analyzer.analyze_text(body.text, body.analysis_type)
    return fish_analyzer.to_response(parsed, determinism.generation_config(body.analysis_type))
