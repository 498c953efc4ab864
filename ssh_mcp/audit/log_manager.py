"""Audit log of executed SSH commands, stored in Qdrant.

Each command that runs to completion becomes one point in the audit
collection, with the command, endpoint and (truncated) outputs as payload.
Vectors come from Mistral embeddings when `MISTRAL_API_KEY` is set, or from a
local hashing embedder otherwise, so the log also works offline.
"""

from __future__ import annotations

import hashlib
import logging
import math
import os
import re
import threading
import time
import uuid
from typing import Callable

from mistralai import Mistral
from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from ssh_mcp.config import AuditSettings
from ssh_mcp.SSH.connections import Endpoint
from ssh_mcp.SSH.utils.types import ExecResult

logger = logging.getLogger(__name__)

MISTRAL_MODEL = "mistral-embed"
VECTOR_SIZE = 1024
# embedding model limit is 8192 tokens ~ 30000 chars
MAX_OUTPUT_CHARS = 30000

Embedder = Callable[[str], list[float]]

_TOKEN_RE = re.compile(r"\w+")


def hash_embedding(text: str, size: int = VECTOR_SIZE) -> list[float]:
    """Deterministic bag-of-words embedding using hashed token buckets."""
    vector = [0.0] * size
    for token in _TOKEN_RE.findall(text.lower()):
        digest = hashlib.sha256(token.encode("utf-8")).digest()
        bucket = int.from_bytes(digest[:4], "big") % size
        vector[bucket] += 1.0 if digest[4] & 1 else -1.0
    norm = math.sqrt(sum(v * v for v in vector))
    if norm == 0:
        # Qdrant rejects zero vectors under cosine distance
        vector[0] = 1.0
        return vector
    return [v / norm for v in vector]


def mistral_embedder(api_key: str) -> Embedder:
    client = Mistral(api_key=api_key)

    def embed_text(text: str) -> list[float]:
        response = client.embeddings.create(model=MISTRAL_MODEL, inputs=[text])
        return response.data[0].embedding

    return embed_text


class CommandAuditLog:
    """Write executed commands into a Qdrant collection."""

    def __init__(
        self,
        client: QdrantClient,
        embed: Embedder = hash_embedding,
        collection: str = "ssh_commands",
        vector_size: int = VECTOR_SIZE,
    ):
        self.client = client
        self.embed = embed
        self.collection = collection
        self.vector_size = vector_size
        self._collection_ready = False
        self._collection_lock = threading.Lock()

    def ensure_collection(self) -> None:
        # Commands run in worker threads; only one of them may create the collection
        with self._collection_lock:
            if self._collection_ready:
                return
            if not self.client.collection_exists(self.collection):
                self.client.create_collection(
                    collection_name=self.collection,
                    vectors_config=VectorParams(size=self.vector_size, distance=Distance.COSINE),
                )
            self._collection_ready = True

    def record(
        self,
        *,
        connection_id: str,
        endpoint: Endpoint,
        command: str,
        result: ExecResult,
    ) -> str:
        """Store one executed command and return its job id."""
        self.ensure_collection()
        job_id = str(uuid.uuid4())
        self.client.upsert(
            collection_name=self.collection,
            points=[
                PointStruct(
                    id=job_id,
                    vector=self.embed(f"COMMAND: {command}"),
                    payload={
                        "job_id": job_id,
                        "connection_id": connection_id,
                        "host": endpoint.host,
                        "port": endpoint.port,
                        "username": endpoint.username,
                        "command": command,
                        "timestamp": time.time(),
                        "return_code": result.exit_code,
                        "stdout": result.stdout[:MAX_OUTPUT_CHARS],
                        "stderr": result.stderr[:MAX_OUTPUT_CHARS],
                    },
                )
            ],
        )
        return job_id


def create_audit_log(settings: AuditSettings) -> CommandAuditLog | None:
    """Build the audit log described by `settings`, or None when disabled."""
    if not settings.enabled:
        return None
    if settings.qdrant_url:
        client = QdrantClient(url=settings.qdrant_url, api_key=os.getenv("QDRANT_API_KEY"))
    else:
        client = QdrantClient(location=":memory:")
    mistral_api_key = os.getenv("MISTRAL_API_KEY")
    embed = mistral_embedder(mistral_api_key) if mistral_api_key else hash_embedding
    logger.info(
        "Command audit log enabled (collection=%s, store=%s, embeddings=%s)",
        settings.collection,
        settings.qdrant_url or "in-memory",
        MISTRAL_MODEL if mistral_api_key else "hashing",
    )
    return CommandAuditLog(client, embed=embed, collection=settings.collection)
