import textwrap

import pytest
from fc.check_swap import ConfigurationError
from fc.check_swap import extraopts


@pytest.fixture
def plugins_ini(tmp_path):
    path = tmp_path / "plugins.ini"
    path.write_text(
        textwrap.dedent(
            """\
            [check_swap]
            measurement = swap_usage
            warning = 50
            critical = 80

            [strict_swap]
            measurement = used_swap_blocks
            strict
            """
        )
    )
    return str(path)


def test_split_spec():
    assert extraopts.split_spec("") == ("check_swap", None)
    assert extraopts.split_spec(None) == ("check_swap", None)
    assert extraopts.split_spec("foo") == ("foo", None)
    assert extraopts.split_spec("@/etc/x.ini") == ("check_swap", "/etc/x.ini")
    assert extraopts.split_spec("foo@/etc/x.ini") == ("foo", "/etc/x.ini")


def test_load_default_section(plugins_ini):
    assert extraopts.load("@" + plugins_ini) == [
        "--measurement=swap_usage",
        "--warning=50",
        "--critical=80",
    ]


def test_load_bare_key_is_flag(plugins_ini):
    assert extraopts.load("strict_swap@" + plugins_ini) == [
        "--measurement=used_swap_blocks",
        "--strict",
    ]


def test_load_missing_section(plugins_ini):
    with pytest.raises(ConfigurationError) as e:
        extraopts.load("nonexistent@" + plugins_ini)
    assert "[nonexistent]" in str(e.value)


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        extraopts.load("@" + str(tmp_path / "nonexistent.ini"))


def test_load_garbage_file(tmp_path):
    path = tmp_path / "plugins.ini"
    path.write_text("no section header\n")
    with pytest.raises(ConfigurationError):
        extraopts.load("@" + str(path))


def test_search_path(plugins_ini, tmp_path):
    search_path = [str(tmp_path / "nonexistent.ini"), plugins_ini]
    assert extraopts.find_config(search_path) == plugins_ini
    assert extraopts.load(None, search_path=search_path)[0] == (
        "--measurement=swap_usage"
    )


def test_search_path_exhausted(tmp_path):
    with pytest.raises(ConfigurationError):
        extraopts.find_config([str(tmp_path / "nonexistent.ini")])


def test_expand_puts_extra_options_first(plugins_ini):
    argv = ["-c", "90", "--extra-opts=@" + plugins_ini, "-v"]
    assert extraopts.expand(argv) == [
        "--measurement=swap_usage",
        "--warning=50",
        "--critical=80",
        "-c",
        "90",
        "-v",
    ]


def test_expand_bare_extra_opts_searches(plugins_ini):
    argv = ["--extra-opts"]
    assert extraopts.expand(argv, search_path=[plugins_ini])[0] == (
        "--measurement=swap_usage"
    )


def test_expand_without_extra_opts():
    assert extraopts.expand(["-m", "swap_usage"]) == ["-m", "swap_usage"]
