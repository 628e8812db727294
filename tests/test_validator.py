"""
Tests for react_code_to_video argument validation.
"""
import pytest

from services.react_video import ArgumentError, RenderRequest, validate_arguments


class TestValidateArguments:
    """Type checks on raw tool arguments."""

    def test_valid_arguments(self, valid_args):
        request = validate_arguments(valid_args)
        assert isinstance(request, RenderRequest)
        assert request.code == valid_args["code"]
        assert (request.width, request.height) == (1280, 720)
        assert request.duration == 1000
        assert request.fps == 30

    def test_fps_defaults_to_30(self, valid_args):
        del valid_args["fps"]
        assert validate_arguments(valid_args).fps == 30

    def test_null_fps_defaults_to_30(self, valid_args):
        valid_args["fps"] = None
        assert validate_arguments(valid_args).fps == 30

    def test_float_numbers_accepted(self, valid_args):
        valid_args["duration"] = 1500.5
        valid_args["fps"] = 29.97
        request = validate_arguments(valid_args)
        assert request.duration == 1500.5
        assert request.fps == 29.97

    def test_ints_stay_ints(self, valid_args):
        request = validate_arguments(valid_args)
        assert type(request.width) is int
        assert type(request.height) is int

    @pytest.mark.parametrize("field", ["code", "width", "height", "duration"])
    def test_missing_required_field(self, valid_args, field):
        del valid_args[field]
        with pytest.raises(ArgumentError) as exc_info:
            validate_arguments(valid_args)
        assert field in exc_info.value.fields
        assert exc_info.value.kind == "argument"

    def test_code_as_number_rejected(self, valid_args):
        valid_args["code"] = 42
        with pytest.raises(ArgumentError) as exc_info:
            validate_arguments(valid_args)
        assert exc_info.value.fields == ["code"]

    def test_numeric_string_rejected(self, valid_args):
        valid_args["width"] = "1280"
        with pytest.raises(ArgumentError):
            validate_arguments(valid_args)

    def test_bool_is_not_a_number(self, valid_args):
        valid_args["height"] = True
        with pytest.raises(ArgumentError):
            validate_arguments(valid_args)

    def test_non_numeric_fps_rejected(self, valid_args):
        valid_args["fps"] = "30"
        with pytest.raises(ArgumentError):
            validate_arguments(valid_args)

    @pytest.mark.parametrize("field", ["width", "height", "duration", "fps"])
    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_number_rejected(self, valid_args, field, value):
        valid_args[field] = value
        with pytest.raises(ArgumentError) as exc_info:
            validate_arguments(valid_args)
        assert exc_info.value.fields == [field]

    @pytest.mark.parametrize("payload", [None, "code", 5, ["code"]])
    def test_non_object_payload(self, payload):
        with pytest.raises(ArgumentError):
            validate_arguments(payload)

    def test_extra_fields_ignored(self, valid_args):
        valid_args["background"] = "red"
        assert validate_arguments(valid_args).width == 1280


class TestNoBoundsChecking:
    """Zero and negative values pass through untouched."""

    @pytest.mark.parametrize("field", ["width", "height", "duration", "fps"])
    def test_zero_passes(self, valid_args, field):
        valid_args[field] = 0
        assert getattr(validate_arguments(valid_args), field) == 0

    @pytest.mark.parametrize("field", ["width", "height", "duration", "fps"])
    def test_negative_passes(self, valid_args, field):
        valid_args[field] = -10
        assert getattr(validate_arguments(valid_args), field) == -10
