"""
Bedrock Text Generation

Single-shot completion against an Amazon Titan text model through
langchain-aws. One attempt per call: failures surface as GenerationError,
there is no provider fallback and no retry.

Titan request body produced by BedrockLLM for provider "amazon":

    {"inputText": <prompt>,
     "textGenerationConfig": {"maxTokenCount": 512, "temperature": 0.7,
                              "topP": 0.9, "stopSequences": []}}
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod

from pdfgenie.core.config import settings
from pdfgenie.core.errors import GenerationError

logger = logging.getLogger(__name__)


class BaseTextGenerator(ABC):
    """Text-generation collaborator used for summaries and answers."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the model's completion for `prompt`, stripped."""


class BedrockTextGenerator(BaseTextGenerator):
    """
    Amazon Titan via langchain_aws.BedrockLLM.

    The LLM object (and its boto3 client) is built on first use so importing
    this module never needs AWS credentials.
    """

    def __init__(
        self,
        model_id:    str | None   = None,
        region:      str | None   = None,
        max_tokens:  int | None   = None,
        temperature: float | None = None,
        top_p:       float | None = None,
    ) -> None:
        self._model_id = model_id or settings.bedrock_model_id
        self._region   = region or settings.aws_region
        self._model_kwargs = {
            "maxTokenCount": max_tokens if max_tokens is not None else settings.llm_max_tokens,
            "temperature":   temperature if temperature is not None else settings.llm_temperature,
            "topP":          top_p if top_p is not None else settings.llm_top_p,
            "stopSequences": [],
        }
        self._llm = None

    def _get_llm(self):
        if self._llm is None:
            from langchain_aws import BedrockLLM

            self._llm = BedrockLLM(
                model_id=self._model_id,
                region_name=self._region,
                model_kwargs=self._model_kwargs,
            )
        return self._llm

    async def generate(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        t0 = time.monotonic()
        try:
            # BedrockLLM only supports async in streaming mode; run the sync call off-loop
            output = await loop.run_in_executor(None, self._get_llm().invoke, prompt)
        except Exception as exc:
            logger.error("Bedrock error | model=%s error=%s", self._model_id, exc)
            raise GenerationError(f"AI processing failed: {str(exc) or 'Unknown error'}") from exc

        logger.info(
            "Bedrock | model=%s prompt_chars=%d output_chars=%d elapsed_ms=%.0f",
            self._model_id, len(prompt), len(output), (time.monotonic() - t0) * 1000,
        )
        return output.strip()
