"""Configuration display utilities."""

from typing import Any, Dict

from rich import print


def format_value(value: Any, max_length: int = 60) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if value is None:
        return "—"
    if isinstance(value, float):
        return f"{value:.6g}"
    text = str(value)
    if len(text) > max_length:
        return f"{text[: max_length - 1]}…"
    return text


def _show_mapping(values: Dict[str, Any], indent: int) -> None:
    pad = "  " * indent
    for key, value in values.items():
        if isinstance(value, dict):
            print(f"{pad}[bold]{key}:[/bold]")
            _show_mapping(value, indent + 1)
        else:
            print(f"{pad}• {key}: {format_value(value)}")


def show_values(title: str, values: Dict[str, Any]) -> None:
    """Show a resolved value tree."""
    print(f"\n[bold cyan]{title}[/bold cyan]")
    if not values:
        print("  [dim](empty)[/dim]")
        return
    _show_mapping(values, 1)
