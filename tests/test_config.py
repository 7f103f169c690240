import pytest

from multi_compress.compression.config import ArbitrationPolicy, CompressMode, Constraints
from multi_compress.compression.convert import Representation
from multi_compress.config import CompressOptions
from multi_compress.exceptions import InvalidOptionsError, UnsupportedRepresentationError


def test_defaults():
    constraints = Constraints.from_options(CompressOptions())

    assert constraints.quality == 0.6
    assert constraints.mode is CompressMode.KEEP_SIZE
    assert constraints.preserve_exif is False
    assert constraints.return_all_results is False
    assert constraints.result_type is Representation.BLOB
    assert constraints.policy == ArbitrationPolicy(size_ratio=0.98, quality_threshold=0.85)


def test_camel_case_aliases():
    options = CompressOptions(
        {
            "mode": "keepQuality",
            "targetWidth": 640,
            "maxHeight": 480,
            "preserveExif": True,
            "returnAllResults": True,
            "type": "base64",
        }
    )
    constraints = Constraints.from_options(options)

    assert constraints.mode is CompressMode.KEEP_QUALITY
    assert constraints.target_width == 640
    assert constraints.max_height == 480
    assert constraints.preserve_exif is True
    assert constraints.return_all_results is True
    assert constraints.result_type is Representation.BASE64


def test_legacy_options():
    options = CompressOptions.legacy(0.8, "file")

    assert options.quality == 0.8
    assert options.mode == "keepSize"
    assert options.result_type == "file"


def test_none_values_fall_back_to_defaults():
    assert CompressOptions({"quality": None}).quality == 0.6


def test_guard_overrides():
    constraints = Constraints.from_options(CompressOptions({"guard_quality": 0.5}))

    assert constraints.policy.quality_threshold == 0.5
    assert constraints.policy.size_ratio == 0.98


@pytest.mark.parametrize("quality", [-0.1, 1.5, "high", True])
def test_invalid_quality(quality):
    with pytest.raises(InvalidOptionsError):
        Constraints.from_options(CompressOptions({"quality": quality}))


def test_invalid_mode():
    with pytest.raises(InvalidOptionsError):
        Constraints.from_options(CompressOptions({"mode": "shrink"}))


def test_invalid_type():
    with pytest.raises(UnsupportedRepresentationError):
        Constraints.from_options(CompressOptions({"type": "text"}))


def test_policy_rejects():
    policy = ArbitrationPolicy()

    assert policy.rejects(990, 1000, 0.99)
    assert policy.rejects(985, 1000, 0.9)
    assert not policy.rejects(979, 1000, 0.99)
    assert not policy.rejects(990, 1000, 0.85)
