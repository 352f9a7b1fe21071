"""Prometheus metrics for the content store."""

from prometheus_client import Counter

# Repository fetches issued by the coordinator
CONTENT_FETCHES = Counter(
    "content_fetches_total",
    "Total number of content fetches issued to the repository",
    ["outcome"],  # found, missing, error, malformed
)

# Requests answered from the session cache
CONTENT_CACHE_HITS = Counter(
    "content_cache_hits_total",
    "Total number of content requests answered from the cache",
)

# Writes committed through the coordinator
CONTENT_COMMITS = Counter(
    "content_commits_total",
    "Total number of content commits",
    ["outcome"],  # saved, rolled_back
)
