"""
Unit tests for canonical JSON encoding and hashing.
"""
import uuid
from datetime import datetime, timedelta, timezone

from core.crypto.canonical import canonical_bytes, canonicalize, to_iso8601
from core.crypto.hashing import canonical_sha256, hash_device_fingerprint, sha256_hex
from core.domain.value_objects import DeviceFingerprint
from offline.domain.request_file import RequestFile
from tests.factories import make_request_file


class TestCanonicalize:
    def test_keys_sorted_recursively(self):
        value = {"b": 1, "a": {"d": [3, {"z": 1, "y": 2}], "c": None}}
        assert canonicalize(value) == '{"a":{"c":null,"d":[3,{"y":2,"z":1}]},"b":1}'

    def test_key_order_does_not_change_bytes(self):
        assert canonical_bytes({"x": 1, "y": 2}) == canonical_bytes({"y": 2, "x": 1})

    def test_array_order_is_kept(self):
        assert canonicalize([3, 1, 2]) == "[3,1,2]"

    def test_non_ascii_is_utf8(self):
        assert canonical_bytes({"name": "Açaí"}) == '{"name":"Açaí"}'.encode("utf-8")

    def test_integral_floats_render_as_integers(self):
        assert canonicalize({"n": 2.0, "m": 2.5}) == '{"m":2.5,"n":2}'

    def test_booleans_stay_booleans(self):
        assert canonicalize({"on": True, "off": False}) == '{"off":false,"on":true}'


class TestHashing:
    def test_canonical_sha256_matches_manual_digest(self):
        value = {"b": 2, "a": 1}
        assert canonical_sha256(value) == sha256_hex('{"a":1,"b":2}')

    def test_sha256_hex_accepts_str_and_bytes(self):
        assert sha256_hex("abc") == sha256_hex(b"abc")
        assert sha256_hex("abc").startswith("ba7816bf")

    def test_device_fingerprint_uses_fingerprint_hash(self):
        assert DeviceFingerprint("machine-1234").hash() == hash_device_fingerprint("machine-1234")

    def test_request_checksum_is_canonical_digest(self):
        request_file = make_request_file(uuid.uuid4())
        payload = RequestFile.from_dict(request_file).payload
        assert payload.checksum() == canonical_sha256(request_file["payload"])
        assert payload.checksum() == request_file["checksumSha256"]


class TestIso8601:
    def test_millisecond_precision_with_z(self):
        value = datetime(2025, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
        assert to_iso8601(value) == "2025-01-02T03:04:05.678Z"

    def test_converts_to_utc(self):
        value = datetime(2025, 1, 2, 1, 0, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert to_iso8601(value) == "2025-01-02T04:00:00.000Z"
