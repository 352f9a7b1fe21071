"""LLM-backed content flows."""

from app.llm.flows.translate import TranslateInput, TranslateOutput, translate_text

__all__ = ["TranslateInput", "TranslateOutput", "translate_text"]
