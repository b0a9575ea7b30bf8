import pytest

from mcp_datahub.tools.config import ToolkitConfig, default_config, normalize_config


def test_default_config():
    config = default_config()
    assert config.default_limit == 10
    assert config.max_limit == 100
    assert config.max_lineage_depth == 5


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        (ToolkitConfig(0, 0, 0), ToolkitConfig(10, 100, 5)),
        (ToolkitConfig(-1, -5, -10), ToolkitConfig(10, 100, 5)),
        (ToolkitConfig(20, 200, 10), ToolkitConfig(20, 200, 10)),
        (ToolkitConfig(50, 0, 3), ToolkitConfig(50, 100, 3)),
    ],
    ids=["all zeros", "negative", "positive preserved", "partial"],
)
def test_normalize_config(given, expected):
    assert normalize_config(given) == expected


def test_normalize_config_leaves_input_untouched():
    given = ToolkitConfig(default_limit=0, max_limit=0, max_lineage_depth=0)
    normalize_config(given)
    assert given.default_limit == 0
    assert given.max_limit == 0