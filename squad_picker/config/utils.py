"""
Configuration Utilities

Helpers the optimize_squad CLI uses to inspect and persist the effective
settings (`--show-config`, `--save-config`).
"""

from pathlib import Path

from loguru import logger

from .settings import SquadPickerConfig


def export_config_to_json(settings: SquadPickerConfig, output_path: Path) -> Path:
    """
    Write settings as JSON that `load_config(config_path=...)` reads back

    Args:
        settings: Effective configuration (file, overrides and environment merged)
        output_path: Destination file; parent directories are created

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(settings.model_dump_json(indent=2))
    logger.info(f"💾 Settings written to {output_path}")
    return output_path


def print_config_summary(settings: SquadPickerConfig) -> None:
    """Print a human-readable summary of the solver settings."""
    optimization = settings.optimization
    frontier = settings.frontier
    selector = settings.selector
    pool = settings.pool

    print("🔧 Squad Picker Configuration Summary")
    print("=" * 50)

    print("🎯 Optimization:")
    print(f"  • Default Solver: {optimization.default_solver}")
    time_limit = optimization.exact_time_limit_seconds
    print(f"  • Exact Time Limit: {'none' if time_limit is None else f'{time_limit:.0f}s'}")

    print("\n📈 Frontier:")
    print(f"  • Max Buckets: {frontier.max_buckets}")
    print(f"  • Fixed Step: {frontier.fixed_step or 'adaptive'}")
    print(f"  • Upgrade Pass: {'On' if frontier.upgrade_pass_enabled else 'Off'}")

    print("\n⚽ Selector:")
    if selector.parallel:
        print(f"  • Parallel: On ({selector.max_workers} workers)")
    else:
        print("  • Parallel: Off")

    print("\n👥 Pool:")
    print(f"  • Unavailable Status Codes: {pool.unavailable_status_codes}")
    if pool.category_aliases:
        aliases = ", ".join(f"{k}→{v}" for k, v in sorted(pool.category_aliases.items()))
        print(f"  • Extra Aliases: {aliases}")

    print("=" * 50)
