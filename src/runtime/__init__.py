"""Runtime package: settings loading, logging setup and dependency wiring."""

__all__: list[str] = []
