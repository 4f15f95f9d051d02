"""
Prometheus metrics for the categorization pipeline (exposed at /metrics)
"""
from prometheus_client import Counter

CLASSIFICATIONS = Counter(
    "post_classifications_total",
    "Post classifications by the resolver tier that produced the base categories",
    ["tier"],
)

MODEL_CALL_FAILURES = Counter(
    "categorization_model_failures_total",
    "Failed or unusable language model calls",
    ["stage", "reason"],
)

CATEGORY_CACHE_EVENTS = Counter(
    "category_name_cache_events_total",
    "Category name cache hits, misses and invalidations",
    ["event"],
)
