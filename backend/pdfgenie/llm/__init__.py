"""
LLM Package

Public API::

    from pdfgenie.llm import BedrockTextGenerator, build_summary_prompt

    generator = BedrockTextGenerator()
    summary = await generator.generate(build_summary_prompt(extracted_text))
"""

from pdfgenie.llm.bedrock import BaseTextGenerator, BedrockTextGenerator
from pdfgenie.llm.prompts import build_qa_prompt, build_summary_prompt, truncate_for_prompt

__all__ = [
    "BaseTextGenerator",
    "BedrockTextGenerator",
    "build_qa_prompt",
    "build_summary_prompt",
    "truncate_for_prompt",
]
