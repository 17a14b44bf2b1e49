"""
Command implementations for the frameforge CLI.

Handles info, validate, and route commands.
"""

import argparse
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import yaml
    HAS_YAML = True
except ImportError:
    HAS_YAML = False

from ..backends.registry import BackendRegistry, get_default_registry
from ..configuration.config import ActiveBackendConfig, normalize_options
from ..configuration.kinds import Kinds
from ..dispatch.router import DispatchRouter
from ..errors import BackendError
from . import display


def show_info(args: argparse.Namespace, registry: Optional[BackendRegistry] = None) -> int:
    """Print the version banner, the registered backends, or usage examples (`args.target`)."""
    if args.target == 'backends':
        registry = registry if registry is not None else get_default_registry()
        print_backends_info(registry, getattr(args, 'kind', None))
    elif args.target == 'examples':
        print_examples()
    else:
        print_version()
    return 0


def validate_config(args: argparse.Namespace, registry: Optional[BackendRegistry] = None) -> int:
    """
    Validate configuration file.

    Checks option names and values, that every selected backend is
    registered, and that its fallback chain terminates.

    Args:
        args: Parsed command-line arguments
        registry: Registry to validate against (default: process-wide registry)

    Returns:
        Exit code
    """
    if not HAS_YAML:
        display.print_error("PyYAML is required. Install with: pip install pyyaml")
        return 1

    config_path = Path(args.config)

    if not config_path.exists():
        display.print_error(f"Config file not found: {config_path}")
        return 1

    registry = registry if registry is not None else get_default_registry()

    try:
        options = load_config(str(config_path))
        config = ActiveBackendConfig(options, use_env=False)

        chains = {}
        for kind in sorted({key.split('.', 1)[0] for key in options}):
            label = config.active_backend(kind) or registry.default_label(kind)
            chains[kind] = registry.fallback_chain(kind, label)

    except (BackendError, ValueError, yaml.YAMLError) as e:
        display.print_error(f"Invalid configuration: {e}")
        return 1

    display.print_success(f"Configuration is valid: {config_path}")

    if not args.quiet:
        for kind, chain in chains.items():
            opts = config.options(kind)
            print(f"\n  {kind}:")
            display.print_field('chain', display.format_chain(chain))
            display.print_field('allow-fallback', display.format_flag(opts.allow_fallback))
            display.print_field('warn-fallback', display.format_flag(opts.warn_fallback))

    return 0


def route_operation(args: argparse.Namespace, registry: Optional[BackendRegistry] = None) -> int:
    """
    Show which backend would serve an operation, without calling it.

    Args:
        args: Parsed command-line arguments
        registry: Registry to route against (default: process-wide registry)

    Returns:
        Exit code
    """
    registry = registry if registry is not None else get_default_registry()

    try:
        options: Dict[str, Any] = {}
        if args.config:
            if not HAS_YAML:
                display.print_error("PyYAML is required for config files. Install with: pip install pyyaml")
                return 1
            options = load_config(args.config)

        kind = Kinds.normalize(args.kind)
        if args.backend:
            options[f"{kind}.backend.library"] = args.backend

        router = DispatchRouter(registry, ActiveBackendConfig(options, use_env=False))
        active = router.active_label(kind)
        used = router.backend_for(kind, args.operation)

    except (BackendError, ValueError) as e:
        display.print_error(str(e))
        return 1

    if used == active:
        display.print_success(f"{kind}.{args.operation}: served by '{active}'")
    else:
        display.print_warning(
            f"{kind}.{args.operation}: '{active}' falls back to '{used}' "
            f"(result moved to '{active}')"
        )
    return 0


# Helper functions

def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load backend options from a YAML file.

    The file mirrors the option keys:

        dataframe:
          backend:
            library: sparse
            warn-fallback: false

    Returns:
        Normalised dotted option mapping

    Raises:
        FileNotFoundError: If the file does not exist
        BackendConfigurationError: If an option name or value is invalid
    """
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(config).__name__}")

    return normalize_options(config)


def print_version():
    from .. import __version__
    display.print_banner(__version__)
    print("Python API: from frameforge import dispatch, config")


def print_backends_info(registry: BackendRegistry, kind_filter: Optional[str] = None):
    """Print information about registered backends."""
    display.print_section("Available Backends")

    backends = registry.list_backends(kind_filter)

    if not backends:
        print("  No backends registered")
        return

    for kind, labels in backends.items():
        default = registry.default_label(kind) if kind in Kinds.DEFAULTS else None
        print(f"\n  {kind}:")
        for label in labels:
            impl = registry.resolve(kind, label)
            details = []
            if label == default:
                details.append('default')
            if impl.fallback:
                details.append(f"fallback: {impl.fallback}")
            suffix = f" [{', '.join(details)}]" if details else ""
            display.print_field(label, f"{impl.description}{suffix}", width=12)


def print_examples():
    """Print usage examples."""
    display.print_section("Usage Examples")

    examples = [
        ("Show registered backends", "frameforge info backends"),
        ("Show DataFrame backends only", "frameforge info backends --kind dataframe"),
        ("Validate a config file", "frameforge validate backends.yaml"),
        ("Which backend serves read_csv under sparse?", "frameforge route dataframe read_csv --backend sparse"),
        ("Select a backend through the environment", "FRAMEFORGE_ARRAY__BACKEND__LIBRARY=masked python job.py"),
    ]

    for desc, cmd in examples:
        print(f"\n  {desc}:")
        print(f"  $ {cmd}")

    print()
