# Optimizer: article scoring and best-article selection
from .models import ArticleScore, OptimizedArticle, ScoreDetails
from .scorer import evaluate
from .selector import optimize_article, rank_articles, select_best

__all__ = [
    "ArticleScore",
    "OptimizedArticle",
    "ScoreDetails",
    "evaluate",
    "optimize_article",
    "rank_articles",
    "select_best",
]
