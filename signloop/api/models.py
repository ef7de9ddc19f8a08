"""
Pydantic models for the contract analysis API.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from signloop.models.schemas import AnalysisResult


class ContractMetadata(BaseModel):
    """Optional hints passed through to the analysis prompt."""
    model_config = ConfigDict(populate_by_name=True)

    contract_type: Optional[str] = Field(default=None, alias="contractType")
    region: Optional[str] = None

    def as_prompt_metadata(self) -> dict:
        return {"contractType": self.contract_type, "region": self.region}


class AnalyzeTextRequest(BaseModel):
    """Request for text-based analysis."""
    text: str = ""
    metadata: Optional[ContractMetadata] = None


class ExtractionResponse(BaseModel):
    """Text extracted from an upload."""
    text: str
    method: str
    confidence: Optional[float] = None
    char_count: int


class AnalysisResponse(BaseModel):
    """API response for analysis results."""
    result: AnalysisResult
    provider: str
    model: str
    processing_time_ms: int
    extraction: Optional[ExtractionResponse] = None


class ErrorResponse(BaseModel):
    """Error body returned for typed pipeline failures."""
    error: str
    error_type: str
