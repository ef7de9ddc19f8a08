"""
Contract Analyzer - main module wiring extraction and LLM analysis together.
"""

import time
import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from signloop.config import Config
from signloop.exceptions import EmptyDocumentError
from signloop.models.llm_client import OpenRouterClient
from signloop.models.prompt_builder import build_analysis_prompt
from signloop.models.response_parser import parse_analysis_response
from signloop.models.schemas import AnalysisResult
from signloop.preprocessor.document_parser import DocumentParser, ExtractionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Validated analysis plus provenance."""
    result: AnalysisResult
    provider: str
    model: str
    processing_time_ms: int
    extraction: Optional[ExtractionResult] = None


class ContractAnalyzer:
    """Runs the extraction and analysis pipeline for a single document."""

    def __init__(self,
                 config: Optional[Config] = None,
                 llm_client: Optional[OpenRouterClient] = None,
                 document_parser: Optional[DocumentParser] = None):
        """
        Initialize the contract analyzer.

        Args:
            config: Configuration settings, or use defaults
            llm_client: Completion client, built from config when omitted
            document_parser: Text extractor, built from config when omitted
        """
        self.config = config or Config()
        self.document_parser = document_parser or DocumentParser(self.config)
        self.llm_client = llm_client or OpenRouterClient.from_config(self.config)

        logger.info("Contract Analyzer initialized (provider=%s, model=%s)",
                    self.config.PROVIDER_NAME, self.llm_client.model)

    async def extract_text(self, file_content: bytes, mime_type: str) -> ExtractionResult:
        """
        Extract text from an uploaded document.

        Args:
            file_content: Binary file content
            mime_type: Declared MIME type

        Returns:
            ExtractionResult for the document
        """
        result = await self.document_parser.extract(file_content, mime_type)
        logger.info("Extracted %d chars from %s via %s",
                    len(result.text), mime_type, result.method.value)
        return result

    async def analyze_text(self,
                           text: str,
                           metadata: Optional[Mapping[str, Any]] = None,
                           model: Optional[str] = None) -> AnalysisOutcome:
        """
        Analyze contract text with the LLM.

        Args:
            text: Contract text
            metadata: Optional ``contractType`` / ``region`` hints
            model: Model override

        Returns:
            AnalysisOutcome with the validated result and provenance
        """
        start_time = time.time()
        model = model or self.llm_client.model

        prompt = build_analysis_prompt(text, metadata, max_chars=self.config.MAX_PROMPT_TEXT_CHARS)
        raw_text = await self.llm_client.complete(prompt, model=model)
        result = parse_analysis_response(raw_text)

        processing_time_ms = int((time.time() - start_time) * 1000)
        logger.info("Analysis complete: risk_badge=%s, %d red flags, %d ms",
                    result.risk_badge, len(result.red_flags), processing_time_ms)

        return AnalysisOutcome(
            result=result,
            provider=self.config.PROVIDER_NAME,
            model=model,
            processing_time_ms=processing_time_ms,
        )

    async def analyze_document(self,
                               file_content: bytes,
                               mime_type: str,
                               metadata: Optional[Mapping[str, Any]] = None,
                               model: Optional[str] = None) -> AnalysisOutcome:
        """
        Extract text from a document and analyze it.

        Args:
            file_content: Binary file content
            mime_type: Declared MIME type
            metadata: Optional ``contractType`` / ``region`` hints
            model: Model override

        Returns:
            AnalysisOutcome including the extraction result

        Raises:
            EmptyDocumentError: If extraction produced no text
        """
        extraction = await self.extract_text(file_content, mime_type)
        if not extraction.text:
            raise EmptyDocumentError("Contract has no text content")

        outcome = await self.analyze_text(extraction.text, metadata, model=model)
        return replace(outcome, extraction=extraction)
