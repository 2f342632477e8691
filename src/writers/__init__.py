# Writers: parallel article generation by several LLM vendors
from .generator import ArticleGenerator, generate_all
from .models import ArticleOutline, GeneratedArticle, ProviderOutcome
from .providers import PROVIDERS, WriterAdapter
from .validation import parse_outline

__all__ = [
    "ArticleGenerator",
    "generate_all",
    "ArticleOutline",
    "GeneratedArticle",
    "ProviderOutcome",
    "PROVIDERS",
    "WriterAdapter",
    "parse_outline",
]
