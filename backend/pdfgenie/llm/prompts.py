"""
Prompt templates for summarization and document Q&A.

Extracted text is cut to a fixed prefix before it is templated in, which
bounds per-request cost (~750 input tokens at the default 3000 chars).
"""

from __future__ import annotations

from langchain_core.prompts import PromptTemplate

from pdfgenie.core.config import settings

SUMMARY_PROMPT = PromptTemplate.from_template(
    "Provide a concise summary of the following document:\n\n{text}\n\nSummary:"
)

QA_PROMPT = PromptTemplate.from_template(
    "Based on this document content:\n\n{text}\n\nQuestion: {question}\n\nAnswer:"
)


def truncate_for_prompt(text: str, limit: int | None = None) -> str:
    """Keep the first `limit` characters, marking the cut with '...'."""
    limit = settings.prompt_max_chars if limit is None else limit
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_summary_prompt(text: str, limit: int | None = None) -> str:
    return SUMMARY_PROMPT.format(text=truncate_for_prompt(text, limit))


def build_qa_prompt(text: str, question: str, limit: int | None = None) -> str:
    return QA_PROMPT.format(text=truncate_for_prompt(text, limit), question=question)
