from __future__ import annotations

import json

import pytest

from unifi_speedtest.errors import APIError, NoValidSamplesError, UnrecognizedFormatError
from unifi_speedtest.models import SpeedtestResult
from unifi_speedtest.normalizer import ResponseNormalizer, _ResponseShape, select_latest

SAMPLES = [
    {"xput_download": 50.0, "xput_upload": 10.0, "latency": 12, "time": 100},
    {"xput_download": 80.5, "xput_upload": 20.25, "latency": 9, "time": 200},
    {"xput_download": 0, "xput_upload": 0, "latency": 0, "time": 150},
]

EXPECTED = SpeedtestResult(download_mbps=80.5, upload_mbps=20.25, latency_ms=9.0, timestamp=200)


@pytest.mark.parametrize(
    "body",
    [
        json.dumps({"meta": {"rc": "ok"}, "data": SAMPLES}),
        json.dumps(SAMPLES),
        json.dumps({"errorCode": 0, "message": "", "data": SAMPLES}),
    ],
    ids=["meta", "array", "v2"],
)
def test_all_shapes_yield_same_result(body: str) -> None:
    assert ResponseNormalizer().normalize(body) == EXPECTED


def test_shape_detection_order() -> None:
    normalizer = ResponseNormalizer()

    assert normalizer.parse_shape(json.dumps({"meta": {"rc": "ok"}, "data": SAMPLES})).shape == "meta"
    assert normalizer.parse_shape(json.dumps(SAMPLES)).shape == "array"
    assert normalizer.parse_shape(json.dumps({"data": SAMPLES})).shape == "v2"


def test_zero_entries_never_selected_even_when_newest() -> None:
    samples = [
        {"xput_download": 10, "xput_upload": 1, "latency": 5, "time": 100},
        {"xput_download": 0, "xput_upload": 0, "latency": 3, "time": 999},
    ]

    assert select_latest(samples).timestamp == 100


def test_upload_only_sample_is_valid() -> None:
    result = select_latest([{"xput_download": 0, "xput_upload": 5, "latency": 1, "time": 7}])

    assert result.upload_mbps == 5.0
    assert result.download_mbps == 0.0


def test_first_sample_wins_on_equal_timestamps() -> None:
    samples = [
        {"xput_download": 10, "xput_upload": 1, "time": 300},
        {"xput_download": 20, "xput_upload": 2, "time": 300},
    ]

    assert select_latest(samples).download_mbps == 10.0


def test_all_zero_samples_raise_no_valid_samples() -> None:
    body = json.dumps(
        {"meta": {"rc": "ok"}, "data": [{"xput_download": 0, "xput_upload": 0, "time": 1}]}
    )

    with pytest.raises(NoValidSamplesError):
        ResponseNormalizer().normalize(body)


def test_meta_with_empty_data_raises_no_valid_samples() -> None:
    with pytest.raises(NoValidSamplesError):
        ResponseNormalizer().normalize(json.dumps({"meta": {"rc": "ok"}, "data": []}))


def test_meta_error_carries_message() -> None:
    body = json.dumps({"meta": {"rc": "error", "msg": "api.err.NoPermission"}, "data": []})

    with pytest.raises(APIError) as err:
        ResponseNormalizer().normalize(body)

    assert "api.err.NoPermission" in str(err.value)
    assert err.value.code == "error"


def test_meta_error_without_message_uses_default() -> None:
    body = json.dumps({"meta": {"rc": "error"}})

    with pytest.raises(APIError, match="Unknown error from controller"):
        ResponseNormalizer().normalize(body)


def test_meta_unexpected_rc_is_reported() -> None:
    with pytest.raises(APIError, match="API returned status: warning"):
        ResponseNormalizer().normalize(json.dumps({"meta": {"rc": "warning"}, "data": []}))


def test_v2_error_code_carries_message() -> None:
    body = json.dumps({"errorCode": 403, "message": "forbidden", "data": []})

    with pytest.raises(APIError) as err:
        ResponseNormalizer().normalize(body)

    assert err.value.code == 403
    assert "forbidden" in str(err.value)


def test_v2_error_code_without_message_uses_default() -> None:
    with pytest.raises(APIError, match="Unknown error from v2 API"):
        ResponseNormalizer().normalize(json.dumps({"errorCode": 5}))


@pytest.mark.parametrize(
    "body",
    [
        "<html>login</html>",
        "",
        "[]",
        json.dumps({"errorCode": 0, "data": []}),
        json.dumps({"unexpected": True}),
        json.dumps("just a string"),
    ],
)
def test_unrecognized_bodies_keep_raw_payload(body: str) -> None:
    with pytest.raises(UnrecognizedFormatError) as err:
        ResponseNormalizer().normalize(body)

    assert err.value.body == body


def test_malformed_entries_are_skipped() -> None:
    samples = [
        "garbage",
        {"xput_download": "n/a", "xput_upload": None, "time": 500},
        {"xput_download": "42.5", "xput_upload": 3, "latency": "7", "time": "400"},
    ]

    result = select_latest(samples)

    assert result == SpeedtestResult(
        download_mbps=42.5, upload_mbps=3.0, latency_ms=7.0, timestamp=400
    )


def test_out_of_range_time_is_treated_as_undated() -> None:
    body = '[{"xput_download":10,"xput_upload":1,"latency":2,"time":1e999}]'

    result = ResponseNormalizer().normalize(body)

    assert result.download_mbps == 10.0
    assert result.timestamp == 0


def test_out_of_range_time_loses_to_dated_sample() -> None:
    body = (
        '[{"xput_download":10,"xput_upload":1,"time":1e999},'
        '{"xput_download":20,"xput_upload":2,"time":5}]'
    )

    assert ResponseNormalizer().normalize(body).download_mbps == 20.0


def test_response_shape_requires_match() -> None:
    class _Incomplete(_ResponseShape):
        name = "incomplete"

    with pytest.raises(TypeError):
        _Incomplete()  # type: ignore[abstract]
