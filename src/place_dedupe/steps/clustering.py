from __future__ import annotations

import hashlib
import math
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from loguru import logger

from place_dedupe.models import DuplicateCluster, DuplicateDetectionResult, PlaceRecord

DEFAULT_MIN_CLUSTER_SIZE = 2
DEFAULT_MIN_CONFIDENCE = 0.6


def find_duplicate_clusters(
    batch_results: Mapping[str, DuplicateDetectionResult],
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> list[DuplicateCluster]:
    """Group places connected by a chain of matches at or above ``min_confidence``.

    An edge A-B exists when either A's result lists B or B's lists A with a
    qualifying confidence; each unordered pair counts once, at the higher of
    its two confidences. Members keep the order in which they first appear in
    ``batch_results``. Clusters come back best first.
    """
    min_cluster_size = _clamp_cluster_size(min_cluster_size)
    min_confidence = _clamp_confidence(min_confidence)

    order: dict[str, int] = {}
    records: dict[str, PlaceRecord] = {}

    def _register(place: PlaceRecord, authoritative: bool = False) -> None:
        if place.id not in order:
            order[place.id] = len(order)
            records[place.id] = place
        elif authoritative:
            records[place.id] = place

    for result in batch_results.values():
        _register(result.original_place, authoritative=True)
    for result in batch_results.values():
        for match in result.potential_duplicates:
            _register(match.place)

    edges: dict[tuple[str, str], float] = {}
    for result in batch_results.values():
        source = result.original_place.id
        for match in result.potential_duplicates:
            target = match.place.id
            if target == source or match.confidence < min_confidence:
                continue
            key = (source, target) if order[source] < order[target] else (target, source)
            edges[key] = max(edges.get(key, 0.0), match.confidence)

    uf = _UnionFind(order)
    for left, right in edges:
        uf.union(left, right)

    edge_scores: dict[str, list[float]] = defaultdict(list)
    for (left, _right), confidence in edges.items():
        edge_scores[uf.find(left)].append(confidence)

    clusters: list[tuple[int, DuplicateCluster]] = []
    for root, members in uf.groups().items():
        if len(members) < min_cluster_size:
            continue
        scores = edge_scores.get(root, [])
        clusters.append(
            (
                order[members[0]],
                DuplicateCluster(
                    cluster_id=_cluster_id(members),
                    places=tuple(records[member] for member in members),
                    avg_confidence=sum(scores) / len(scores) if scores else 0.0,
                ),
            )
        )

    clusters.sort(key=lambda item: (-item[1].avg_confidence, item[0]))
    logger.debug(
        f"Clustered {len(order)} places over {len(edges)} qualifying pairs into {len(clusters)} clusters"
    )
    return [cluster for _, cluster in clusters]


def filter_dismissed_clusters(
    clusters: Sequence[DuplicateCluster],
    dismissed_pairs: Iterable[tuple[str, str]],
) -> list[DuplicateCluster]:
    """Drop every cluster that contains any pair the user already dismissed."""
    dismissed = {frozenset(pair) for pair in dismissed_pairs if len(set(pair)) == 2}
    if not dismissed:
        return list(clusters)

    kept: list[DuplicateCluster] = []
    for cluster in clusters:
        ids = cluster.place_ids
        if any(
            frozenset((ids[i], ids[j])) in dismissed
            for i in range(len(ids))
            for j in range(i + 1, len(ids))
        ):
            continue
        kept.append(cluster)
    return kept


def _cluster_id(member_ids: Sequence[str]) -> str:
    digest = hashlib.sha1("\x1f".join(sorted(member_ids)).encode("utf-8")).hexdigest()
    return f"cluster_{digest[:12]}"


def _clamp_cluster_size(value: int) -> int:
    try:
        size = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MIN_CLUSTER_SIZE
    return max(DEFAULT_MIN_CLUSTER_SIZE, size)


def _clamp_confidence(value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_MIN_CONFIDENCE
    if math.isnan(number):
        return DEFAULT_MIN_CONFIDENCE
    return min(1.0, max(0.0, number))


class _UnionFind:
    """Union-find whose roots are always the earliest-seen member."""

    def __init__(self, order: Mapping[str, int]) -> None:
        self._order = order
        self._parent: dict[str, str] = {item: item for item in order}

    def find(self, item: str) -> str:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, left: str, right: str) -> None:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left == root_right:
            return
        if self._order[root_right] < self._order[root_left]:
            root_left, root_right = root_right, root_left
        self._parent[root_right] = root_left

    def groups(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = defaultdict(list)
        for item in sorted(self._parent, key=self._order.__getitem__):
            grouped[self.find(item)].append(item)
        return grouped
