import json

import pytest

from place_dedupe import cli
from place_dedupe.cli import main, read_dismissed_pairs, read_places, write_places
from place_dedupe.errors import InputError
from place_dedupe.steps import NameSimilarity


@pytest.fixture
def places_file(tmp_path, barcelona_places):
    path = tmp_path / "places.json"
    write_places(path, barcelona_places)
    return path


def test_places_survive_csv_and_json_files(tmp_path, barcelona_places) -> None:
    for name in ("places.csv", "places.json"):
        path = tmp_path / name
        write_places(path, barcelona_places)
        assert read_places(path) == barcelona_places


def test_read_places_rejects_missing_and_malformed_files(tmp_path) -> None:
    with pytest.raises(InputError):
        read_places(tmp_path / "missing.csv")

    broken = tmp_path / "broken.json"
    broken.write_text('{"id": "1"}', encoding="utf-8")
    with pytest.raises(InputError, match="list of place objects"):
        read_places(broken)


def test_read_dismissed_pairs(tmp_path) -> None:
    as_json = tmp_path / "dismissed.json"
    as_json.write_text(json.dumps([["place-1", "place-2"], ["lonely"]]), encoding="utf-8")
    as_csv = tmp_path / "dismissed.csv"
    as_csv.write_text("place-3,place-4\n,place-5\n", encoding="utf-8")

    assert read_dismissed_pairs(as_json) == [("place-1", "place-2")]
    assert read_dismissed_pairs(as_csv) == [("place-3", "place-4")]


def test_generate_writes_dataset(tmp_path, capsys) -> None:
    output = tmp_path / "generated.csv"
    main(["generate", "--size", "30", "--seed", "1", "--output", str(output)])

    assert len(read_places(output)) == 30
    assert "30 places" in capsys.readouterr().out


def test_detect_prints_ranked_matches(places_file, capsys) -> None:
    main(["detect", "--input", str(places_file), "--target-id", "place-1"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["original_place"]["id"] == "place-1"
    assert payload["total_candidates"] == 3
    assert [match["place"]["id"] for match in payload["potential_duplicates"]] == ["place-2"]
    assert payload["has_high_confidence_duplicates"] is True


def test_detect_unknown_place_exits_with_error(places_file) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["detect", "--input", str(places_file), "--target-id", "missing"])
    assert excinfo.value.code == 1


def test_clusters_writes_output_file(tmp_path, places_file) -> None:
    output = tmp_path / "out" / "clusters.json"
    main(["clusters", "--input", str(places_file), "--output", str(output)])

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert len(payload) == 1
    assert [place["id"] for place in payload[0]["places"]] == ["place-1", "place-2"]


def test_clusters_honours_dismissed_pairs(tmp_path, places_file, capsys) -> None:
    dismissed = tmp_path / "dismissed.json"
    dismissed.write_text(json.dumps([["place-2", "place-1"]]), encoding="utf-8")

    main(["clusters", "--input", str(places_file), "--dismissed", str(dismissed)])

    assert json.loads(capsys.readouterr().out) == []


def test_clusters_with_bad_config_exits_with_error(tmp_path, places_file) -> None:
    config = tmp_path / "config.json"
    config.write_text("not json", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["clusters", "--input", str(places_file), "--config", str(config)])
    assert excinfo.value.code == 1


def test_run_test_writes_summary(tmp_path) -> None:
    main(["run-test", "--size", "40", "--seed", "2", "--output-dir", str(tmp_path), "--show-clusters", "0"])

    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["place_count"] == 40
    assert summary["cluster_count"] == len(json.loads((tmp_path / "clusters.json").read_text(encoding="utf-8")))
    assert summary["config"]["weights"]["name"] == 0.4
    assert (tmp_path / "test_dataset.csv").exists()


def test_sbert_name_scorer_is_selectable(monkeypatch, places_file, capsys) -> None:
    class _ExactNames(NameSimilarity):
        def score(self, left: str, right: str) -> float:
            return 1.0 if left == right else 0.0

    monkeypatch.setattr(cli, "SbertNameSimilarity", _ExactNames)

    main(["detect", "--input", str(places_file), "--target-id", "place-1", "--name-scorer", "sbert"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["potential_duplicates"][0]["factors"]["name_score"] == 1.0
