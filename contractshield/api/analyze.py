"""Contract analysis endpoints: file upload and pasted text."""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from contractshield.dependencies import get_analyzer
from contractshield.services.analysis_store import AnalysisRecord
from contractshield.services.orchestrator import ContractAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)


class AnalyzeTextRequest(BaseModel):
    """Pasted contract text to analyze."""
    text: Optional[str] = None
    language: str = "en"


def _success(record: AnalysisRecord) -> Dict[str, Any]:
    return {
        "success": True,
        "id": record.id,
        "analysis": record.analysis,
        "sourceLabel": record.source_label,
    }


@router.post("/upload")
async def analyze_upload(
    file: Optional[UploadFile] = File(None),
    language: str = Form("en"),
    analyzer: ContractAnalyzer = Depends(get_analyzer)
) -> Dict[str, Any]:
    """Upload a PDF, Word document or image and analyze its text."""
    logger.info(f"/analyze/upload called, filename: {file.filename if file else None}")

    content = None
    media_type = ""
    filename = ""
    if file is not None:
        # Read one byte past the ceiling so oversize files are detected without reading them fully
        content = await file.read(analyzer.settings.max_upload_bytes + 1)
        media_type = file.content_type or ""
        filename = file.filename or ""

    record = await analyzer.analyze_upload(content, media_type, filename, language)
    return _success(record)


@router.post("/text")
async def analyze_text(
    request: AnalyzeTextRequest,
    analyzer: ContractAnalyzer = Depends(get_analyzer)
) -> Dict[str, Any]:
    """Analyze pasted contract text."""
    logger.info(f"/analyze/text called, length: {len(request.text or '')}")
    record = await analyzer.analyze_text(request.text, request.language)
    return _success(record)
