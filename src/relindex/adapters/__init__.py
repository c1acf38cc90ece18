"""Source extraction adapters."""

from .base import ExportFacts, GrammarVariant, ModuleFacts
from .lexical import BraceScanResult, LexicalRules, MaskedSource, mask_source, scan_braces
from .ts_js import TypeScriptJavaScriptExtractor, extract_module_facts

__all__ = [
    "BraceScanResult",
    "ExportFacts",
    "GrammarVariant",
    "LexicalRules",
    "MaskedSource",
    "ModuleFacts",
    "TypeScriptJavaScriptExtractor",
    "extract_module_facts",
    "mask_source",
    "scan_braces",
]
