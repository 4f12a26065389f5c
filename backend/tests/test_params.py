"""Tests for query param models."""

import pytest
from werkzeug.datastructures import MultiDict

from api.params import AssetListParams, CountActiveParams
from utils.normalize import ValidationError


class TestAssetListParams:

    def test_defaults(self):
        params = AssetListParams.from_args(MultiDict())
        assert params.page_size == 50
        assert params.building is None
        assert params.status is None

    def test_camel_case_alias(self):
        params = AssetListParams.from_args(MultiDict({"pageSize": "200", "building": " 1 ", "status": "Yes"}))
        assert params.page_size == 200
        assert params.building == "1"
        assert params.status == "Yes"

    def test_empty_values_use_defaults(self):
        params = AssetListParams.from_args(MultiDict({"pageSize": "", "status": ""}))
        assert params.page_size == 50
        assert params.status is None

    @pytest.mark.parametrize("raw", ["abc", "0", "-5", "2.5"])
    def test_invalid_page_size_reports_field(self, raw):
        with pytest.raises(ValidationError) as exc:
            AssetListParams.from_args(MultiDict({"pageSize": raw}))
        assert exc.value.field == "pageSize"

    def test_large_page_size_accepted(self):
        assert AssetListParams.from_args(MultiDict({"pageSize": "5000"})).page_size == 5000

    def test_unknown_params_ignored(self):
        params = AssetListParams.from_args(MultiDict({"foo": "bar"}))
        assert params.page_size == 50

    def test_frozen(self):
        params = AssetListParams.from_args(MultiDict())
        with pytest.raises(Exception):
            params.page_size = 10


class TestCountActiveParams:

    def test_default_building(self):
        assert CountActiveParams.from_args(MultiDict()).building == "Computer Center"

    def test_empty_building_falls_back_to_default(self):
        assert CountActiveParams.from_args(MultiDict({"building": ""})).building == "Computer Center"

    def test_building_whitespace_is_kept(self):
        assert CountActiveParams.from_args(MultiDict({"building": " Library "})).building == " Library "

    def test_building_passed_through(self):
        assert CountActiveParams.from_args(MultiDict({"building": "Library"})).building == "Library"
