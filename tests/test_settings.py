from unittest.mock import Mock

from notitlebar.models import IgnoreListType
from notitlebar.settings import Settings


def test_defaults(test_logger):
    settings = Settings(logger=test_logger)
    assert settings.only_main_monitor is False
    assert settings.ignore_list_type is IgnoreListType.DISABLED
    assert settings.ignore_list == []
    assert settings.validate() == []


def test_values(test_logger):
    settings = Settings(
        {"only_main_monitor": "yes", "ignore_list_type": "Blacklist", "ignore_list": "firefox"},
        logger=test_logger,
    )
    assert settings.only_main_monitor is True
    assert settings.ignore_list_type is IgnoreListType.BLACKLIST
    assert settings.ignore_list == ["firefox"]


def test_invalid_list_type_disables(test_logger):
    settings = Settings({"ignore_list_type": "greylist"}, logger=test_logger)
    assert settings.ignore_list_type is IgnoreListType.DISABLED


def test_matches_ignore_list(test_logger):
    settings = Settings({"ignore_list": ["*Terminal*", "firefox"]}, logger=test_logger)
    assert settings.matches_ignore_list("Firefox")
    assert settings.matches_ignore_list("", "GNOME terminal - bash")
    assert not settings.matches_ignore_list("code", "Visual Studio Code")
    assert not Settings(logger=test_logger).matches_ignore_list("firefox")


def test_update_emits_changed_keys_only(test_logger):
    settings = Settings({"ignore_list": ["a"]}, logger=test_logger)
    monitor = Mock()
    ignore_list = Mock()
    list_type = Mock()
    settings.connect("changed::only-main-monitor", monitor)
    settings.connect("changed::ignore-list", ignore_list)
    settings.connect("changed::ignore-list-type", list_type)

    settings.update({"ignore_list": ["a"], "only_main_monitor": True})
    monitor.assert_called_once_with("only_main_monitor")
    ignore_list.assert_not_called()
    list_type.assert_not_called()

    settings.update({"ignore_list": ["a", "b"], "only_main_monitor": True, "debug": True})
    ignore_list.assert_called_once_with("ignore_list")
    assert monitor.call_count == 1

    # explicit default value is not a change
    settings.update({"ignore_list": ["a", "b"], "only_main_monitor": True, "ignore_list_type": "disabled"})
    list_type.assert_not_called()


def test_validate(test_logger):
    settings = Settings(
        {"ignore_list_type": "greylist", "only_main_monitr": True, "ignore_list": ["ok", 3], "debug": "maybe"},
        logger=test_logger,
    )
    problems = settings.validate()
    assert any("ignore_list_type" in p and "Invalid value 'greylist'" in p for p in problems)
    assert any("Pattern 3 is not a string" in p for p in problems)
    assert any("debug" in p and "Expected bool" in p for p in problems)
    assert any("did you mean 'only_main_monitor'" in p for p in problems)
