"""Base textual similarity between a query and a record's searchable text.

Two strategies share one async interface:

- ``KeywordSimilarity``: local token-overlap scoring, always available
- ``EmbeddingSimilarity``: cosine similarity of remote embedding vectors,
  falling back to keyword scoring on any provider failure

Field boosts are applied by the scorer on top of either; only this base
term changes between the two.
"""
from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from ..config import CONFIG, EngineConfig
from ..exceptions import EmbeddingError
from ..net import CircuitBreaker
from ..utils.name_variants import edit_similarity

logger = logging.getLogger(__name__)

# English and Filipino stop words ignored on the query side
STOPWORDS = frozenset(
    "the a an in on at to for of and or is was "
    "ang ng sa na ay si ni mga o pa".split()
)


@runtime_checkable
class SimilarityProvider(Protocol):
    """Anything that can score a query against many texts at once."""

    name: str

    async def similarities(self, query: str, texts: Sequence[str]) -> list[float]:
        """Return one score in [0, 1] per text, in input order."""
        ...


def _token_score(q: str, t: str) -> float:
    if t == q:
        return 1.0
    if t.startswith(q):
        return 0.9
    if q.startswith(t):
        return 0.85
    if q in t or t in q:
        return 0.75
    sim = edit_similarity(q, t)
    return sim * 0.7 if sim >= 0.6 else 0.0


class KeywordSimilarity:
    """Token-overlap similarity with prefix, containment and typo tolerance."""

    name = "keyword"

    def score(self, query: str, text: str) -> float:
        """Similarity of ``query`` to ``text`` in [0, 1].

        Exact match is 1.0 and full containment 0.9. Otherwise each
        non-stop-word query token takes its best candidate-token score and
        the result is ``0.6 * matched_ratio + 0.4 * mean_token_score``.
        """
        q = (query or "").lower().strip()
        t = (text or "").lower().strip()
        if not q or not t:
            return 0.0
        if q == t:
            return 1.0
        if q in t:
            return 0.9

        query_tokens = [tok for tok in q.split() if len(tok) > 1 and tok not in STOPWORDS]
        text_tokens = [tok for tok in t.split() if len(tok) > 1]
        if not query_tokens or not text_tokens:
            return 0.0

        matched = 0
        total = 0.0
        for qt in query_tokens:
            best = max(_token_score(qt, tt) for tt in text_tokens)
            if best > 0:
                matched += 1
                total += best
        return 0.6 * (matched / len(query_tokens)) + 0.4 * (total / len(query_tokens))

    async def similarities(self, query: str, texts: Sequence[str]) -> list[float]:
        return [self.score(query, text) for text in texts]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of two vectors; 0.0 for mismatched lengths or zero vectors."""
    if len(a) != len(b) or not a:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, (httpx.TimeoutException, httpx.TransportError))


class EmbeddingSimilarity:
    """Semantic similarity from an OpenAI-compatible embeddings endpoint.

    The query and every candidate text are embedded in one request; each
    candidate's score is the query/candidate cosine mapped from [-1, 1]
    onto [0, 1]. Any failure (disabled, no key, circuit open, network,
    auth, rate limit, malformed payload, timeout) degrades to
    ``KeywordSimilarity`` for the whole batch and is never raised.
    """

    name = "embedding"

    def __init__(
        self,
        config: EngineConfig = CONFIG,
        client: httpx.AsyncClient | None = None,
        breaker: CircuitBreaker | None = None,
        fallback: KeywordSimilarity | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None
        self.breaker = breaker or CircuitBreaker("embeddings")
        self.fallback = fallback or KeywordSimilarity()

    @property
    def enabled(self) -> bool:
        return bool(self.config.embeddings_enabled and self.config.embeddings_api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.embeddings_timeout)
        return self._client

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed ``texts`` in one call; raises EmbeddingError on any failure."""
        if not self.enabled:
            raise EmbeddingError("embedding provider disabled or missing API key")
        if not self.breaker.allow_call():
            raise EmbeddingError("circuit_open:embeddings")

        client = self._get_client()
        headers = {
            "Authorization": f"Bearer {self.config.embeddings_api_key}",
            "Content-Type": "application/json",
        }
        payload = {"input": list(texts), "model": self.config.embeddings_model}

        @retry(
            reraise=True,
            stop=stop_after_attempt(2),
            wait=wait_exponential_jitter(initial=0.2, max=1.0),
            retry=retry_if_exception(_is_retryable),
        )
        async def _do() -> dict[str, Any]:
            resp = await client.post(self.config.embeddings_url, json=payload, headers=headers)
            resp.raise_for_status()
            return resp.json()

        try:
            body = await _do()
        except httpx.HTTPStatusError as e:
            self.breaker.record_failure()
            raise EmbeddingError(f"embedding request failed: {e}", status_code=e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            self.breaker.record_failure()
            raise EmbeddingError(f"embedding request failed: {e}") from e

        vectors = _parse_embeddings(body, expected=len(texts))
        self.breaker.record_success()
        return vectors

    async def similarities_with_source(self, query: str, texts: Sequence[str]) -> tuple[list[float], bool]:
        """Scores plus whether they came from embeddings (False on fallback).

        The flag travels with the result so concurrent calls on one
        provider never see each other's outcome.
        """
        if not texts:
            return [], False
        try:
            # Bound the whole exchange, retries included
            vectors = await asyncio.wait_for(
                self.embed([query, *texts]),
                timeout=self.config.embeddings_timeout * 3,
            )
        except (EmbeddingError, asyncio.TimeoutError) as e:
            if isinstance(e, asyncio.TimeoutError):
                self.breaker.record_failure()
            logger.warning(
                "Semantic similarity unavailable, falling back to keyword matching: %s",
                type(e).__name__,
            )
            return await self.fallback.similarities(query, texts), False

        query_vector, text_vectors = vectors[0], vectors[1:]
        return [(cosine_similarity(query_vector, v) + 1.0) / 2.0 for v in text_vectors], True

    async def similarities(self, query: str, texts: Sequence[str]) -> list[float]:
        scores, _ = await self.similarities_with_source(query, texts)
        return scores

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> EmbeddingSimilarity:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False


def _parse_embeddings(body: Any, expected: int) -> list[list[float]]:
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, list) or len(data) != expected:
        raise EmbeddingError("malformed embeddings payload")
    items = sorted(data, key=lambda item: item.get("index", 0) if isinstance(item, dict) else 0)
    vectors: list[list[float]] = []
    for item in items:
        vector = item.get("embedding") if isinstance(item, dict) else None
        if not isinstance(vector, list) or not vector:
            raise EmbeddingError("malformed embeddings payload")
        try:
            vectors.append([float(x) for x in vector])
        except (TypeError, ValueError) as e:
            raise EmbeddingError("non-numeric embedding vector") from e
    return vectors
