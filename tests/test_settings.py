import json

import pytest

from memscan.datatypes import DataType, Endianness
from memscan.scope import SearchScope
from memscan.settings import Settings


def test_defaults():
    settings = Settings()
    assert settings.default_search_scope is SearchScope.BOTH
    assert settings.default_data_type is DataType.U64
    assert settings.default_endianness is Endianness.NATIVE
    assert settings.search_buffer_size == 128 * 1024 * 1024
    assert settings.show_settings is False


def test_toggle():
    settings = Settings()
    settings.toggle()
    assert settings.show_settings is True
    settings.toggle()
    assert settings.show_settings is False


def test_to_dict_of_defaults():
    assert Settings().to_dict() == {
        "default_search_scope": "Both",
        "default_data_type": "U64",
        "default_endianness": "Native",
        "search_buffer_size": 134217728,
    }


def test_show_settings_is_not_persisted():
    settings = Settings()
    settings.toggle()
    assert "show_settings" not in settings.to_dict()


def test_dict_round_trip():
    settings = Settings(
        default_search_scope=SearchScope.HEAP,
        default_data_type=DataType.F32,
        default_endianness=Endianness.BIG,
        search_buffer_size=4096,
    )
    assert Settings.from_dict(settings.to_dict()) == settings


def test_from_dict_missing_fields_use_defaults():
    settings = Settings.from_dict({"default_data_type": "U8"})
    assert settings.default_data_type is DataType.U8
    assert settings.default_search_scope is SearchScope.BOTH
    assert settings.search_buffer_size == Settings().search_buffer_size


def test_from_dict_ignores_unknown_fields():
    assert Settings.from_dict({"colour": "blue"}) == Settings()


@pytest.mark.parametrize(
    "data",
    [
        {"default_data_type": "I8"},
        {"default_search_scope": "Everything"},
        {"search_buffer_size": -1},
        {"search_buffer_size": "large"},
    ],
)
def test_from_dict_rejects_invalid(data):
    with pytest.raises(ValueError):
        Settings.from_dict(data)


def test_save_and_load(tmp_path):
    path = tmp_path / "config" / "settings.json"
    settings = Settings(default_search_scope=SearchScope.ALL, search_buffer_size=1024)
    settings.save(path)
    assert Settings.load(path) == settings
    assert json.loads(path.read_text())["default_search_scope"] == "All"


def test_load_missing_file_gives_defaults(tmp_path):
    assert Settings.load(tmp_path / "absent.json") == Settings()


def test_load_garbage_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert Settings.load(path) == Settings()