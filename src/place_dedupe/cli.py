from __future__ import annotations

import argparse
import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from loguru import logger

from place_dedupe.config import DetectionConfig, load_detection_config
from place_dedupe.datasets import PLACE_COLUMNS, ReferenceDatasetGenerator
from place_dedupe.errors import InputError, PlaceDedupeError
from place_dedupe.interfaces import DedupePipeline
from place_dedupe.log import setup_logging
from place_dedupe.models import DuplicateCluster, PlaceRecord
from place_dedupe.runners import LocalDedupePipeline
from place_dedupe.settings import get_settings
from place_dedupe.steps import (
    ConfidenceScorer,
    NameSimilarity,
    PlaceCleaner,
    SbertNameSimilarity,
    detect_duplicates,
)
from place_dedupe.steps.cleanup import ALT_NAME_SEPARATOR

NAME_SCORERS = ("default", "sbert")


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    try:
        if args.command == "generate":
            generate(size=args.size, duplicate_rate=args.duplicate_rate, seed=args.seed, output=args.output)
            return
        if args.command == "detect":
            detect(
                input_path=args.input,
                target_id=args.target_id,
                config_path=args.config,
                min_confidence=args.min_confidence,
                limit=args.limit,
                name_scorer=args.name_scorer,
            )
            return
        if args.command == "clusters":
            clusters(
                input_path=args.input,
                config_path=args.config,
                dismissed_path=args.dismissed,
                min_cluster_size=args.min_cluster_size,
                min_confidence=args.min_confidence,
                max_candidates=args.max_candidates,
                max_workers=args.max_workers,
                output=args.output,
                name_scorer=args.name_scorer,
            )
            return
        if args.command == "run-test":
            run_test(
                size=args.size,
                duplicate_rate=args.duplicate_rate,
                seed=args.seed,
                output_dir=args.output_dir,
                input_path=args.input,
                config_path=args.config,
                min_confidence=args.min_confidence,
                max_workers=args.max_workers,
                show_clusters=args.show_clusters,
                name_scorer=args.name_scorer,
            )
            return
    except PlaceDedupeError as exc:
        logger.error(str(exc))
        raise SystemExit(1) from exc

    parser.print_help()


def generate(*, size: int, duplicate_rate: float, seed: int, output: Path) -> None:
    records = ReferenceDatasetGenerator(seed=seed).generate(size=size, duplicate_rate=duplicate_rate)
    output.parent.mkdir(parents=True, exist_ok=True)
    write_places(output, records)
    print(f"Dataset: {output} ({len(records)} places)")


def detect(
    *,
    input_path: Path,
    target_id: str,
    config_path: Path | None,
    min_confidence: float | None,
    limit: int,
    name_scorer: str = "default",
) -> None:
    config = load_detection_config(config_path)
    places = read_places(input_path)

    target = next((place for place in places if place.id == target_id), None)
    if target is None:
        raise InputError(f"Place {target_id!r} not found in {input_path}")

    candidates = [place for place in places if place.id != target_id]
    result = detect_duplicates(target, candidates, config, scorer=_build_scorer(name_scorer))

    threshold = config.min_confidence_score if min_confidence is None else min_confidence
    matches = [match for match in result.potential_duplicates if match.confidence >= threshold]

    payload = result.to_dict()
    payload["potential_duplicates"] = [match.to_dict() for match in matches[:limit]]
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def clusters(
    *,
    input_path: Path,
    config_path: Path | None,
    dismissed_path: Path | None,
    min_cluster_size: int,
    min_confidence: float,
    max_candidates: int,
    max_workers: int,
    output: Path | None,
    name_scorer: str = "default",
) -> None:
    config = load_detection_config(config_path)
    places = read_places(input_path)
    dismissed = read_dismissed_pairs(dismissed_path) if dismissed_path else []

    pipeline: DedupePipeline = LocalDedupePipeline(
        min_cluster_size=min_cluster_size,
        min_confidence=min_confidence,
        dismissed_pairs=dismissed,
        max_candidates=max_candidates,
        max_workers=max_workers,
        scorer=_build_scorer(name_scorer),
    )
    found = pipeline.run(places, config)
    payload = _clusters_payload(found)

    if output is None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    _write_json(output, payload)
    print(f"Clusters: {output} ({len(found)} clusters)")


def run_test(
    *,
    size: int,
    duplicate_rate: float,
    seed: int,
    output_dir: Path,
    input_path: Path | None,
    config_path: Path | None,
    min_confidence: float,
    max_workers: int,
    show_clusters: int,
    name_scorer: str = "default",
) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    config = load_detection_config(config_path)

    if input_path is None:
        places = ReferenceDatasetGenerator(seed=seed).generate(size=size, duplicate_rate=duplicate_rate)
        dataset_path = output_dir / "test_dataset.csv"
        write_places(dataset_path, places)
    else:
        places = read_places(input_path)
        dataset_path = input_path

    pipeline: DedupePipeline = LocalDedupePipeline(
        min_confidence=min_confidence,
        max_candidates=None,
        max_workers=max_workers,
        scorer=_build_scorer(name_scorer),
    )
    found = pipeline.run(places, config)

    clusters_path = output_dir / "clusters.json"
    summary_path = output_dir / "summary.json"

    _write_json(clusters_path, _clusters_payload(found))
    summary = _build_summary(
        place_count=len(places),
        clusters=found,
        config=config,
        dataset_path=dataset_path,
        clusters_path=clusters_path,
    )
    _write_json(summary_path, summary)

    print(f"Dataset: {dataset_path}")
    print(f"Clusters: {clusters_path}")
    print(f"Summary: {summary_path}")
    print("---")
    print(f"places={summary['place_count']}")
    print(f"clusters={summary['cluster_count']}")
    print(f"clustered_places={summary['clustered_place_count']}")
    print(f"avg_cluster_size={summary['avg_cluster_size']}")
    if show_clusters > 0:
        print("---")
        print("sample_clusters=")
        print(json.dumps(_cluster_sample_payload(found, limit=show_clusters), indent=2, ensure_ascii=False))


def _build_summary(
    *,
    place_count: int,
    clusters: list[DuplicateCluster],
    config: DetectionConfig,
    dataset_path: Path,
    clusters_path: Path,
) -> dict[str, object]:
    cluster_sizes = [len(cluster.places) for cluster in clusters]
    clustered_place_count = len({place_id for cluster in clusters for place_id in cluster.place_ids})

    return {
        "place_count": place_count,
        "cluster_count": len(clusters),
        "clustered_place_count": clustered_place_count,
        "avg_cluster_size": round(sum(cluster_sizes) / len(cluster_sizes), 3) if cluster_sizes else 0.0,
        "max_cluster_size": max(cluster_sizes) if cluster_sizes else 0,
        "min_cluster_size": min(cluster_sizes) if cluster_sizes else 0,
        "config": config.to_dict(),
        "dataset_path": str(dataset_path),
        "clusters_path": str(clusters_path),
    }


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="place-dedupe", description="Place duplicate detection CLI")
    parser.add_argument("--log-level", type=str, default=settings.log_level)
    subparsers = parser.add_subparsers(dest="command")

    generate_parser = subparsers.add_parser("generate", help="Generate a synthetic place catalogue")
    generate_parser.add_argument("--size", type=int, default=500)
    generate_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    generate_parser.add_argument("--seed", type=int, default=42)
    generate_parser.add_argument("--output", type=Path, default=Path("data/reference_places.csv"))

    detect_parser = subparsers.add_parser("detect", help="Rank potential duplicates of one place")
    detect_parser.add_argument("--input", type=Path, required=True)
    detect_parser.add_argument("--target-id", type=str, required=True)
    detect_parser.add_argument("--config", type=Path, default=None)
    detect_parser.add_argument("--min-confidence", type=float, default=None)
    detect_parser.add_argument("--limit", type=int, default=10)
    detect_parser.add_argument("--name-scorer", choices=NAME_SCORERS, default="default")

    clusters_parser = subparsers.add_parser("clusters", help="Find clusters of duplicate places")
    clusters_parser.add_argument("--input", type=Path, required=True)
    clusters_parser.add_argument("--config", type=Path, default=None)
    clusters_parser.add_argument("--dismissed", type=Path, default=None)
    clusters_parser.add_argument("--min-cluster-size", type=int, default=settings.min_cluster_size)
    clusters_parser.add_argument("--min-confidence", type=float, default=settings.min_confidence)
    clusters_parser.add_argument("--max-candidates", type=int, default=settings.max_candidates)
    clusters_parser.add_argument("--max-workers", type=int, default=settings.max_workers)
    clusters_parser.add_argument("--output", type=Path, default=None)
    clusters_parser.add_argument("--name-scorer", choices=NAME_SCORERS, default="default")

    run_test_parser = subparsers.add_parser(
        "run-test",
        help="Generate or load a test catalogue, cluster it, and output clusters + summary",
    )
    run_test_parser.add_argument("--size", type=int, default=500)
    run_test_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    run_test_parser.add_argument("--seed", type=int, default=42)
    run_test_parser.add_argument("--input", type=Path, default=None)
    run_test_parser.add_argument("--config", type=Path, default=None)
    run_test_parser.add_argument("--min-confidence", type=float, default=settings.min_confidence)
    run_test_parser.add_argument("--max-workers", type=int, default=settings.max_workers)
    run_test_parser.add_argument("--output-dir", type=Path, default=settings.output_dir)
    run_test_parser.add_argument("--show-clusters", type=int, default=10)
    run_test_parser.add_argument("--name-scorer", choices=NAME_SCORERS, default="default")

    return parser


def read_places(path: Path) -> list[PlaceRecord]:
    """Load places from a CSV file or a JSON list of objects."""
    if not path.exists():
        raise InputError(f"Input file not found: {path}")

    if path.suffix.lower() == ".json":
        try:
            with path.open("r", encoding="utf-8") as handle:
                rows = json.load(handle)
        except json.JSONDecodeError as exc:
            raise InputError(f"Input file is not valid JSON: {path} ({exc})") from exc
        if not isinstance(rows, list):
            raise InputError(f"JSON input must be a list of place objects: {path}")
        rows = [row for row in rows if isinstance(row, dict)]
    else:
        with path.open("r", newline="", encoding="utf-8") as handle:
            rows = list(csv.DictReader(handle))

    return PlaceCleaner().clean(rows)


def write_places(path: Path, places: list[PlaceRecord]) -> None:
    if path.suffix.lower() == ".json":
        _write_json(path, [place.to_dict() for place in places])
        return

    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=PLACE_COLUMNS)
        writer.writeheader()
        for place in places:
            writer.writerow(
                {
                    "id": place.id,
                    "name": place.name,
                    "kind": place.kind,
                    "city": place.city or "",
                    "country": place.country or "",
                    "lat": place.coords.lat if place.coords else "",
                    "lon": place.coords.lon if place.coords else "",
                    "alt_names": ALT_NAME_SEPARATOR.join(place.alt_names),
                }
            )


def read_dismissed_pairs(path: Path) -> list[tuple[str, str]]:
    """Dismissed pairs as a JSON list of ``[id1, id2]`` or a two-column CSV."""
    if not path.exists():
        raise InputError(f"Dismissed pairs file not found: {path}")

    if path.suffix.lower() == ".json":
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise InputError(f"Dismissed pairs file is not valid JSON: {path} ({exc})") from exc
        rows = raw if isinstance(raw, list) else []
    else:
        with path.open("r", newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))

    pairs: list[tuple[str, str]] = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            continue
        left, right = str(row[0]).strip(), str(row[1]).strip()
        if left and right:
            pairs.append((left, right))
    return pairs


def _build_scorer(name: str) -> ConfidenceScorer:
    if name == "sbert":
        logger.info("Loading SBERT name similarity model")
        return ConfidenceScorer(name_similarity=SbertNameSimilarity())
    return ConfidenceScorer(name_similarity=NameSimilarity())


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)


def _clusters_payload(clusters: list[DuplicateCluster]) -> list[dict[str, Any]]:
    return [cluster.to_dict() for cluster in clusters]


def _cluster_sample_payload(clusters: list[DuplicateCluster], limit: int = 10) -> list[dict[str, Any]]:
    ranked = sorted(clusters, key=lambda cluster: (-len(cluster.places), cluster.cluster_id))
    payload: list[dict[str, Any]] = []
    for cluster in ranked[:limit]:
        payload.append(
            {
                "cluster_id": cluster.cluster_id,
                "size": len(cluster.places),
                "avg_confidence": round(cluster.avg_confidence, 4),
                "places": [
                    {"id": place.id, "name": place.name, "city": place.city, "kind": place.kind}
                    for place in cluster.places
                ],
            }
        )
    return payload


if __name__ == "__main__":
    main()
