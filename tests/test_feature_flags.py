from feature_flags import (
    get_trace_feature,
    is_color_enabled,
    is_descriptive_enabled,
    reload as reload_features,
)


def setup_function():
    reload_features()


def test_trace_flags_disabled_by_default():
    assert is_descriptive_enabled({}) is False
    assert is_color_enabled({}) is False
    assert is_descriptive_enabled() is False


def test_trace_flags_can_be_overridden_via_env():
    assert is_descriptive_enabled({"SUDOKU_DESCRIPTIVE": "1"}) is True
    assert is_color_enabled({"SUDOKU_COLORED": "yes"}) is True
    assert is_color_enabled({"SUDOKU_COLORED": "maybe"}) is False


def test_cli_keys_take_precedence():
    env = {"CLI_DESCRIPTIVE": "off", "SUDOKU_DESCRIPTIVE": "on"}
    assert is_descriptive_enabled(env) is False
    env = {"CLI_COLORED": "garbage", "SUDOKU_COLORED": "true"}
    assert is_color_enabled(env) is True


def test_trace_feature_block_is_a_copy():
    block = get_trace_feature()
    assert block == {"descriptive": False, "colored": False}
    block["descriptive"] = True
    assert get_trace_feature()["descriptive"] is False
