"""
Contract analysis orchestration.

Runs one request through the pipeline:

    Received -> Validating -> Extracting (uploads only) -> Prompting
             -> Reasoning -> Normalizing -> Storing -> Succeeded

Input and extraction problems raise and nothing is stored. Reasoning-service
failures, timeouts and malformed replies are absorbed: the fallback result is
stored and returned instead, marked with ``confidence: "degraded"``.
"""
import asyncio
import logging
import re
import time
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from contractshield.config import Settings, settings as default_settings
from contractshield.errors import (
    ExtractionFailed,
    InvalidInput,
    MalformedReasoningOutput,
    NoExtractableText,
    PayloadTooLarge,
    ReasoningServiceFailed,
)
from contractshield.prompts.contract_analysis import build_analysis_prompt
from contractshield.services.analysis_store import TEXT_SOURCE_LABEL, AnalysisRecord, AnalysisStore
from contractshield.services.extractor import extract_text
from contractshield.services.normalizer import fallback_result, normalize_reply
from contractshield.services.reasoning_client import ReasoningClient

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/jpg",
    "image/png",
})

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class Stage(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    EXTRACTING = "extracting"
    PROMPTING = "prompting"
    REASONING = "reasoning"
    NORMALIZING = "normalizing"
    STORING = "storing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _safe_filename(filename: str) -> str:
    name = _UNSAFE_FILENAME_CHARS.sub("_", Path(filename or "upload").name).strip("._")
    return name[:100] or "upload"


class ContractAnalyzer:
    """Facade used by the API layer to run and store analyses."""

    def __init__(
        self,
        store: AnalysisStore,
        reasoning_client: ReasoningClient,
        settings: Optional[Settings] = None,
        extractor: Callable[[bytes, str, str], str] = extract_text,
    ):
        self.store = store
        self.reasoning_client = reasoning_client
        self.settings = settings or default_settings
        self.extractor = extractor

    def _stage(self, request_id: str, stage: Stage) -> None:
        logger.debug(f"[{request_id}] stage: {stage.value}")

    # ------------------------------------------------------------------ #
    # Entry points
    # ------------------------------------------------------------------ #

    async def analyze_text(self, text: Optional[str], language: str = "en") -> AnalysisRecord:
        """Analyze pasted contract text."""
        request_id = uuid.uuid4().hex[:8]
        self._stage(request_id, Stage.RECEIVED)
        try:
            self._stage(request_id, Stage.VALIDATING)
            if not text or not text.strip():
                raise InvalidInput("No text provided")
            if len(text.strip()) < self.settings.min_text_length:
                raise InvalidInput(
                    f"Text is too short to analyze (minimum {self.settings.min_text_length} characters)"
                )
            return await self._analyze(request_id, text, language, TEXT_SOURCE_LABEL)
        except Exception:
            self._stage(request_id, Stage.FAILED)
            raise

    async def analyze_upload(
        self,
        content: Optional[bytes],
        media_type: str,
        filename: str,
        language: str = "en",
    ) -> AnalysisRecord:
        """Extract text from an uploaded file and analyze it."""
        request_id = uuid.uuid4().hex[:8]
        self._stage(request_id, Stage.RECEIVED)
        try:
            self._stage(request_id, Stage.VALIDATING)
            self.validate_upload(content, media_type)

            self._stage(request_id, Stage.EXTRACTING)
            text = await self._extract(content, media_type, filename)
            stripped = text.strip()
            if not stripped or len(stripped) < self.settings.min_text_length:
                logger.warning(f"[{request_id}] No usable text extracted from {filename}, length: {len(stripped)}")
                raise NoExtractableText()

            return await self._analyze(request_id, text, language, filename or "upload")
        except Exception:
            self._stage(request_id, Stage.FAILED)
            raise

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #

    def validate_upload(self, content: Optional[bytes], media_type: str) -> None:
        """Reject uploads before any extraction is attempted."""
        if content is None:
            raise InvalidInput("No file uploaded.")
        if (media_type or "").lower() not in ALLOWED_MEDIA_TYPES:
            raise InvalidInput(
                f"Unsupported file type '{media_type}'. Upload a PDF, Word document, JPEG or PNG."
            )
        if not content:
            raise InvalidInput("Uploaded file is empty.")
        if len(content) > self.settings.max_upload_bytes:
            limit_mb = self.settings.max_upload_bytes // (1024 * 1024)
            raise PayloadTooLarge(f"File is too large (maximum {limit_mb}MB)")

    async def _extract(self, content: bytes, media_type: str, filename: str) -> str:
        uploads_dir = Path(self.settings.uploads_directory)
        uploads_dir.mkdir(parents=True, exist_ok=True)
        scratch_path = uploads_dir / f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{_safe_filename(filename)}"
        scratch_path.write_bytes(content)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._extract_from_file, scratch_path, media_type, filename),
                timeout=self.settings.extraction_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Text extraction timed out after {self.settings.extraction_timeout_seconds}s, file: {filename}")
            raise ExtractionFailed("extraction took too long") from e
        finally:
            self._cleanup(scratch_path)

    def _extract_from_file(self, path: Path, media_type: str, filename: str) -> str:
        return self.extractor(path.read_bytes(), media_type, filename)

    @staticmethod
    def _cleanup(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete temp file {path}: {e}")

    async def _analyze(self, request_id: str, text: str, language: str, source_label: str) -> AnalysisRecord:
        self._stage(request_id, Stage.PROMPTING)
        prompt = build_analysis_prompt(text, language, max_chars=self.settings.max_prompt_chars)
        logger.info(f"[{request_id}] Analyzing contract text, length: {len(text)}, prompt length: {len(prompt)}")

        analysis = await self._reason(request_id, prompt)

        self._stage(request_id, Stage.STORING)
        record = AnalysisRecord(source_label=source_label, analysis=analysis)
        self.store.put(record)
        self._stage(request_id, Stage.SUCCEEDED)
        logger.info(
            f"[{request_id}] Analysis stored, id: {record.id}, score: {analysis['score']}, "
            f"confidence: {analysis['confidence']}"
        )
        return record

    async def _reason(self, request_id: str, prompt: str) -> Dict[str, Any]:
        self._stage(request_id, Stage.REASONING)
        try:
            raw = await asyncio.wait_for(
                self.reasoning_client.complete(prompt),
                timeout=self.settings.reasoning_timeout_seconds,
            )
        except ReasoningServiceFailed as e:
            logger.warning(f"[{request_id}] Reasoning service failed, using fallback result: {e.message}")
            return fallback_result()
        except asyncio.TimeoutError:
            logger.warning(
                f"[{request_id}] Reasoning service timed out after "
                f"{self.settings.reasoning_timeout_seconds}s, using fallback result"
            )
            return fallback_result()

        self._stage(request_id, Stage.NORMALIZING)
        try:
            return normalize_reply(raw)
        except MalformedReasoningOutput as e:
            logger.warning(f"[{request_id}] Malformed reasoning output, using fallback result: {e.message}")
            return fallback_result()
        except Exception as e:
            logger.error(f"[{request_id}] Normalizing reply failed, using fallback result: {e}", exc_info=True)
            return fallback_result()
