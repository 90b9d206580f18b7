import json

import pytest

from accesssim.core.evaluator.requests import AccessRequest, parse_batch
from accesssim.core.policy.exceptions import InvalidBatchError
from accesssim.core.policy.loader import default_request_batch, load_request_batch


def test_access_request_from_wire_keys():
    r = AccessRequest.from_mapping(
        {"id": "EMP001", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"}
    )

    assert r.employee_id == "EMP001"
    assert r.access_level == 2
    assert r.requested_time == "09:15"
    assert r.requested_minutes == 555
    assert r.room == "ServerRoom"
    assert r.to_dict()["request_time"] == "09:15"


def test_access_request_accepts_camel_case_aliases():
    r = AccessRequest.from_mapping(
        {"employeeId": "EMP9", "accessLevel": 1, "requestTime": "08:00", "room": "Vault"}
    )
    assert r.employee_id == "EMP9"
    assert r.requested_minutes == 480


@pytest.mark.parametrize(
    "raw",
    [
        {"id": "", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"},
        {"access_level": 2, "request_time": "09:15", "room": "ServerRoom"},
        {"id": "EMP001", "access_level": "2", "request_time": "09:15", "room": "ServerRoom"},
        {"id": "EMP001", "access_level": 2, "request_time": "quarter past", "room": "ServerRoom"},
        {"id": "EMP001", "access_level": 2, "request_time": "09:15"},
        "EMP001",
    ],
)
def test_access_request_rejects_malformed_fields(raw):
    with pytest.raises(InvalidBatchError):
        AccessRequest.from_mapping(raw)


@pytest.mark.parametrize("raw", [None, "invalid", {"id": "EMP001"}, 42])
def test_parse_batch_requires_a_list(raw):
    with pytest.raises(InvalidBatchError):
        parse_batch(raw)


def test_parse_batch_rejects_whole_batch_on_one_bad_request():
    raw = [
        {"id": "EMP001", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"},
        {"id": "EMP002", "access_level": 2, "request_time": "25:00", "room": "ServerRoom"},
    ]
    with pytest.raises(InvalidBatchError, match="request #1"):
        parse_batch(raw)


def test_parse_batch_enforces_max_size():
    raw = [{"id": f"E{i}", "access_level": 1, "request_time": "09:00", "room": "Vault"} for i in range(3)]

    assert len(parse_batch(raw, max_size=3)) == 3
    with pytest.raises(InvalidBatchError):
        parse_batch(raw, max_size=2)


def test_parse_batch_accepts_empty_list():
    assert parse_batch([]) == []


def test_load_request_batch_accepts_employees_wrapper(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps({"employees": [{"id": "EMP1", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"}]})
    )

    batch = load_request_batch(str(path))
    assert [r.employee_id for r in batch] == ["EMP1"]


def test_default_request_batch_is_valid():
    batch = default_request_batch()
    assert len(batch) == 10
    assert all(isinstance(r, AccessRequest) for r in batch)
