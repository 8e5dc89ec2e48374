import pytest

from tts_studio.errors import DataInconsistency, NotFound
from tts_studio.store.models import Segment, SegmentStatus
from tts_studio.store.snapshot import DatasetSnapshot


def test_snapshot_indices_match_positions(dataset_payload):
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    for uid, position in snapshot.segments_index.items():
        segment = snapshot.get_segment(uid)
        assert segment.uid == uid
        assert snapshot.segments[position] is segment
    for uid in snapshot.batches_index:
        assert snapshot.get_batch(uid).uid == uid
    assert snapshot.check_consistency() == []


def test_snapshot_unknown_uid_raises_not_found(dataset_payload):
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    with pytest.raises(NotFound):
        snapshot.get_segment("missing")
    with pytest.raises(NotFound) as excinfo:
        snapshot.get_batch("missing")
    assert excinfo.value.kind == "batch"
    assert excinfo.value.uid == "missing"


def test_snapshot_index_pointing_past_sequence_is_inconsistent(dataset_payload):
    dataset_payload["segments_index"]["seg-b2"] = 9
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    with pytest.raises(DataInconsistency):
        snapshot.get_segment("seg-b2")
    assert any("seg-b2" in problem for problem in snapshot.check_consistency())


def test_snapshot_index_pointing_at_other_uid_is_inconsistent(dataset_payload):
    dataset_payload["segments_index"]["seg-a1"] = 1
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    with pytest.raises(DataInconsistency):
        snapshot.get_segment("seg-a1")


def test_snapshot_derives_missing_indices(dataset_payload):
    del dataset_payload["batches_index"]
    del dataset_payload["segments_index"]
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    assert snapshot.segments_index == {"seg-a1": 0, "seg-a2": 1, "seg-b1": 2, "seg-b2": 3}
    assert snapshot.batches_index == {"batch-a": 0, "batch-b": 1}


def test_consistency_reports_unknown_batch_and_num_drift(dataset_payload):
    dataset_payload["segments"][1]["batch"] = "batch-z"
    dataset_payload["segments"][2]["num"] = 7
    problems = DatasetSnapshot.from_payload(dataset_payload).check_consistency()
    assert any("batch-z" in problem for problem in problems)
    assert any("num 7" in problem for problem in problems)


def test_replace_segment_keeps_slot_by_uid(dataset_payload):
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    data = dict(dataset_payload["segments"][2], num=0, status="OK")
    previous = snapshot.replace_segment(Segment.model_validate(data))
    assert previous.num == 2
    stored = snapshot.get_segment("seg-b1")
    assert snapshot.segments[2] is stored
    assert stored.status is SegmentStatus.OK
    assert snapshot.segments[0].uid == "seg-a1"


def test_segments_for_batch(dataset_payload):
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    assert [segment.uid for segment in snapshot.segments_for_batch("batch-b")] == ["seg-b1", "seg-b2"]
    with pytest.raises(NotFound):
        snapshot.segments_for_batch("batch-z")


def test_payload_keeps_unknown_fields_and_defaults_status(dataset_payload):
    dataset_payload["segments"][0]["speaker"] = "narrator"
    dataset_payload["segments"][3]["status"] = None
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    payload = snapshot.to_payload()
    assert payload["segments"][0]["speaker"] == "narrator"
    assert payload["segments"][3]["status"] == "UNCHECKED"
    assert payload["segments_index"] == dataset_payload["segments_index"]


def test_snapshot_batch_index_past_sequence_is_inconsistent(dataset_payload):
    dataset_payload["batches_index"]["batch-b"] = 5
    snapshot = DatasetSnapshot.from_payload(dataset_payload)
    with pytest.raises(DataInconsistency):
        snapshot.get_batch("batch-b")
    assert snapshot.get_batch("batch-a").uid == "batch-a"
    assert any("batch batch-b" in problem for problem in snapshot.check_consistency())
