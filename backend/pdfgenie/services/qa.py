"""Document Q&A — answers a question against text the client already holds."""

from __future__ import annotations

import logging

from pdfgenie.llm.bedrock import BaseTextGenerator
from pdfgenie.llm.prompts import build_qa_prompt

logger = logging.getLogger(__name__)


class QuestionAnsweringService:

    def __init__(self, generator: BaseTextGenerator) -> None:
        self._generator = generator

    async def answer(self, extracted_text: str, question: str) -> str:
        logger.info(
            "Q&A | text_chars=%d question_chars=%d", len(extracted_text), len(question),
        )
        return await self._generator.generate(build_qa_prompt(extracted_text, question))
