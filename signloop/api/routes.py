"""
API routes for contract analysis.
"""

import logging
from typing import Optional
from fastapi import APIRouter, File, Form, UploadFile, Depends

from signloop.config import Config
from signloop.contract_analyzer import ContractAnalyzer, AnalysisOutcome
from signloop.exceptions import EmptyDocumentError
from signloop.preprocessor.document_parser import ExtractionResult
from signloop.api.models import AnalyzeTextRequest, AnalysisResponse, ExtractionResponse

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/v1")


# Dependency to get analyzer instance
def get_analyzer() -> ContractAnalyzer:
    """Dependency to get analyzer instance."""
    return ContractAnalyzer(Config())


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": Config().VERSION}


@router.post("/extract", response_model=ExtractionResponse)
async def extract_file(
    file: UploadFile = File(...),
    analyzer: ContractAnalyzer = Depends(get_analyzer)
):
    """
    Extract text from an uploaded document.

    Args:
        file: Uploaded document
        analyzer: Contract analyzer instance

    Returns:
        Extracted text with method and confidence
    """
    file_content = await file.read()
    extraction = await analyzer.extract_text(file_content, file.content_type or "")
    return _extraction_response(extraction)


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_text(
    request: AnalyzeTextRequest,
    analyzer: ContractAnalyzer = Depends(get_analyzer)
):
    """
    Analyze contract text.

    Args:
        request: Contract text and optional metadata
        analyzer: Contract analyzer instance

    Returns:
        Validated analysis with provenance
    """
    if not request.text:
        raise EmptyDocumentError("No text provided")

    metadata = request.metadata.as_prompt_metadata() if request.metadata else None
    outcome = await analyzer.analyze_text(request.text, metadata)
    return _analysis_response(outcome)


@router.post("/analyze/file", response_model=AnalysisResponse)
async def analyze_file(
    file: UploadFile = File(...),
    contract_type: Optional[str] = Form(None),
    region: Optional[str] = Form(None),
    analyzer: ContractAnalyzer = Depends(get_analyzer)
):
    """
    Extract and analyze an uploaded contract document.

    Args:
        file: Uploaded document
        contract_type: Optional contract type hint
        region: Optional region hint
        analyzer: Contract analyzer instance

    Returns:
        Validated analysis with provenance and extraction details
    """
    file_content = await file.read()
    outcome = await analyzer.analyze_document(
        file_content,
        file.content_type or "",
        metadata={"contractType": contract_type, "region": region},
    )
    return _analysis_response(outcome)


def _extraction_response(extraction: ExtractionResult) -> ExtractionResponse:
    return ExtractionResponse(
        text=extraction.text,
        method=extraction.method.value,
        confidence=extraction.confidence,
        char_count=len(extraction.text),
    )


def _analysis_response(outcome: AnalysisOutcome) -> AnalysisResponse:
    return AnalysisResponse(
        result=outcome.result,
        provider=outcome.provider,
        model=outcome.model,
        processing_time_ms=outcome.processing_time_ms,
        extraction=_extraction_response(outcome.extraction) if outcome.extraction else None,
    )
