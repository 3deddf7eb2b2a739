"""Configuration commands for the entities CLI."""

from cyclopts import App

from entities.config import get_config

config_app = App(name="config", help="Manage configuration")


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Set a configuration setting.

    Args:
        key: Configuration key, such as ``database.url`` or ``entities.log.sql``
        value: Configuration value
        global_: If True, set in global config. If False, set in local config.
    """
    config = get_config(use_global=global_)
    config.set(key, value)
    scope = "global" if global_ else "local"
    print(f"Set {key} = {value} ({scope})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Unset a configuration setting."""
    config = get_config(use_global=global_)
    config.unset(key)
    scope = "global" if global_ else "local"
    print(f"Unset {key} ({scope})")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Get the value of a configuration setting, defaults included."""
    config = get_config(use_global=global_)
    value = config.get(key)
    if value is None:
        print(f"{key} is not set")
    else:
        print(f"{key} = {value} [{config.source(key)}]")


@config_app.command(name="list")
def list_config(global_: bool = False, overrides_only: bool = False) -> None:
    """List configuration settings with the file each value comes from.

    Args:
        global_: If True, list global config only. If False, list merged config.
        overrides_only: If True, hide values that come from the built-in defaults.
    """
    config = get_config(use_global=global_)
    shown = 0
    for key, value in sorted(config.list().items()):
        source = config.source(key)
        if overrides_only and source == "default":
            continue
        print(f"{key} = {value} [{source}]")
        shown += 1

    if not shown:
        scope = "global" if global_ else "local"
        print(f"No {scope} configuration settings")
