"""Tagging service with Google Gemini integration and rule-based fallback."""

import asyncio
import json
import logging

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.domains.tagging.rules import generate_fallback_tags
from app.exceptions.ai import (
    AIConfigurationError,
    AIContentFilterError,
    AIEmptyResponseError,
    AIParsingError,
    AIServiceError,
    AITimeoutError,
)
from app.schemas.tagging import FileTagging

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_LIMIT = 1000

SYSTEM_INSTRUCTION = """You are an AI file organization expert.
Analyze the file information and generate relevant tags, folder suggestions, and filename improvements.
Consider the file name, type, and content if provided.
Respond with JSON in the exact format specified."""

# Structured-output schema for the reply
RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "suggestedFolderName": {"type": "STRING"},
        "suggestedFileName": {"type": "STRING"},
        "confidence": {"type": "NUMBER"},
    },
    "required": ["tags", "confidence"],
}

# Gemini finish reasons: 1 = STOP, 2 = MAX_TOKENS, 3 = SAFETY, 4 = RECITATION, 5 = OTHER
FINISH_REASON_SAFETY = 3


class TaggingService:
    """Tags files with Gemini, degrading to rule-based tagging on any failure.

    There is exactly one Gemini request per call and no retries: a single
    failure (missing key, network error, timeout, blocked or empty reply,
    malformed JSON) goes straight to :func:`generate_fallback_tags`.
    """

    def __init__(self, model=None):
        self.model = model if model is not None else self._initialize_client()

    @property
    def model_name(self) -> str:
        return settings.gemini_model

    @property
    def is_configured(self) -> bool:
        return self.model is not None

    def _initialize_client(self):
        """Initialize Google Gemini client, or return None when no key is set."""
        if not settings.gemini_api_key:
            logger.warning("Gemini API key not configured; using rule-based tagging only")
            return None

        try:
            genai.configure(api_key=settings.gemini_api_key)
            model = genai.GenerativeModel(
                model_name=settings.gemini_model,
                system_instruction=SYSTEM_INSTRUCTION,
                safety_settings={
                    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                },
                generation_config=genai.types.GenerationConfig(
                    candidate_count=1,
                    max_output_tokens=settings.gemini_max_tokens,
                    temperature=0.4,
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
            logger.info(f"Google Gemini client initialized (model: {settings.gemini_model})")
            return model
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {str(e)}")
            return None

    async def generate_file_tags(
        self, file_name: str, file_type: str, file_content: str | None = None
    ) -> FileTagging:
        """Return tags and organisation suggestions for a file. Never raises."""
        try:
            return await self._generate_ai_tags(file_name, file_type, file_content)
        except AIServiceError as e:
            logger.warning(f"AI tagging failed for '{file_name}' ({e.message}); using fallback rules")
        except Exception as e:
            logger.error(f"Unexpected AI tagging error for '{file_name}': {str(e)}; using fallback rules")
        return generate_fallback_tags(file_name, file_type)

    async def _generate_ai_tags(
        self, file_name: str, file_type: str, file_content: str | None
    ) -> FileTagging:
        if not self.model:
            raise AIConfigurationError("Gemini API key not configured")

        prompt = self._build_tagging_prompt(file_name, file_type, file_content)

        try:
            response = await asyncio.wait_for(
                self._generate_content_async(prompt),
                timeout=settings.ai_request_timeout,
            )
        except TimeoutError:
            raise AITimeoutError("AI tagging request timed out") from None

        return self._parse_tagging_response(response)

    def _build_tagging_prompt(
        self, file_name: str, file_type: str, file_content: str | None
    ) -> str:
        """Build the user prompt for a single file."""
        prompt = f"""
File: {file_name}
Type: {file_type}
"""
        if file_content:
            prompt += f"Content preview: {file_content[:CONTENT_PREVIEW_LIMIT]}\n"

        prompt += """
Generate appropriate tags and organization suggestions for this file.
Tags should be relevant categories like: document, report, image, project, finance, personal, work, etc.
Suggest a folder name if this file should be organized into a category.
Suggest an improved filename if the current one could be more descriptive.
"""
        return prompt

    async def _generate_content_async(self, prompt: str) -> str:
        """Generate content using Gemini API asynchronously."""
        # The SDK call is blocking; run it in the default thread pool
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, lambda: self.model.generate_content(prompt))

        if not response:
            raise AIEmptyResponseError()

        if not getattr(response, "candidates", None):
            logger.error(f"AI response has no candidates; prompt feedback: {getattr(response, 'prompt_feedback', None)}")
            raise AIContentFilterError()

        candidate = response.candidates[0]
        if getattr(candidate, "finish_reason", None) == FINISH_REASON_SAFETY:
            raise AIContentFilterError()

        try:
            text = response.text
        except (ValueError, IndexError) as e:
            raise AIEmptyResponseError(f"AI response had no text: {str(e)}") from e

        if not text or not text.strip():
            raise AIEmptyResponseError()
        return text

    def _parse_tagging_response(self, response: str) -> FileTagging:
        """Parse the JSON reply into a FileTagging."""
        # Extract JSON from response (handle code blocks)
        json_start = response.find("{")
        json_end = response.rfind("}") + 1
        if json_start == -1 or json_end == 0:
            raise AIParsingError("No JSON found in tagging response")

        try:
            data = json.loads(response[json_start:json_end])
            return FileTagging.model_validate(data)
        except json.JSONDecodeError as e:
            raise AIParsingError(f"Invalid JSON in tagging response: {str(e)}") from e
        except PydanticValidationError as e:
            raise AIParsingError(f"Tagging response did not match schema: {str(e)}") from e

    def get_service_status(self) -> dict:
        """Report whether AI tagging is available."""
        return {
            "ai_configured": self.is_configured,
            "model_name": self.model_name if self.is_configured else "not_configured",
            "fallback": "rule_based",
        }
