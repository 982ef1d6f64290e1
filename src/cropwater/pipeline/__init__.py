"""
cropwater Pipeline Module.

Provides the daily simulation driver and its result containers.
"""

__all__ = [
    "SimulationArgs",
    "WaterBalanceDriver",
    "simulate",
    "CumulativeResult",
    "DailyResult",
]


def __getattr__(name):
    """Lazy import so that results can be used without loading the driver."""
    if name in ("SimulationArgs", "WaterBalanceDriver", "simulate"):
        from cropwater.pipeline import simulation
        return getattr(simulation, name)
    if name in ("CumulativeResult", "DailyResult"):
        from cropwater.pipeline import results
        return getattr(results, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
