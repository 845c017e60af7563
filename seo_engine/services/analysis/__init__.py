"""Pure stages of the opportunity analysis pipeline."""

from seo_engine.services.analysis.aggregator import aggregate_queries
from seo_engine.services.analysis.catalog_matcher import find_related_product, normalize_tags
from seo_engine.services.analysis.clustering import cluster_keywords, jaccard, select_primary
from seo_engine.services.analysis.scoring import calculate_opportunity_score

__all__ = [
    "aggregate_queries",
    "calculate_opportunity_score",
    "cluster_keywords",
    "find_related_product",
    "jaccard",
    "normalize_tags",
    "select_primary",
]
