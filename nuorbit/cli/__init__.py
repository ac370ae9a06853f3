"""NuOrbit CLI — Typer-based command-line interface."""
