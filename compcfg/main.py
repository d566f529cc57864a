"""Entry point for the compcfg command."""

import logging
import sys
from pathlib import Path

from .config.loader import load_config
from .errors import ComponentError
from .registry import ComponentRegistry


def _print_summary(registry: ComponentRegistry) -> None:
    enabled = registry.get_all_components()
    disabled = registry.get_disabled_components()
    print(f"Enabled components ({len(enabled)}):")
    for component in enabled:
        print(f"  {component.global_name}  {component.root_location}")
    if disabled:
        print(f"Disabled components ({len(disabled)}):")
        for component in disabled:
            print(f"  {component.global_name}  {component.root_location}")

    by_server: dict[str, list[str]] = {}
    for webapp in registry.get_all_webapp_resource_infos():
        by_server.setdefault(webapp.server, []).append(
            f"{webapp.context_root or '/'}  ({webapp.component_name}#{webapp.name})"
        )
    for server in sorted(by_server):
        print(f"Webapps on server '{server}':")
        for line in sorted(by_server[server]):
            print(f"  {line}")


def main() -> int:
    """Boot a registry for the given project directory and print what loaded."""
    # Project directory from the command line, or the current directory
    if len(sys.argv) > 1:
        project_path = Path(sys.argv[1]).resolve()
    else:
        project_path = Path.cwd()

    config = load_config(project_path)
    logging.basicConfig(
        level=config.settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    registry = ComponentRegistry(properties=config.settings.properties, home=project_path)
    try:
        registry.boot(config, project_path)
    except ComponentError as e:
        logging.getLogger(__name__).error(f"Component registry failed to start: {e}")
        return 1

    _print_summary(registry)
    registry.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
