#!/usr/bin/env python

from __future__ import annotations

import argparse
import sys
from datetime import date

from cropwater.core.config import SimulationConfig, configure_logging, get_config
from cropwater.core.types import Location
from cropwater.data.contracts import AutoIrrigationControl, get_irrigation_method
from cropwater.data.sources import load_climate_csv, load_plant_csv, load_soil_csv
from cropwater.pipeline.simulation import SimulationArgs, simulate


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        description="Simulate the daily soil water balance of one field")
    parser.add_argument("--climate", required=True,
                        help="Delimited climate station file")
    parser.add_argument("--station", default=None,
                        help="Station name, first station of the file if omitted")
    parser.add_argument("--plant", required=True,
                        help="Delimited plant parameter file")
    parser.add_argument("--plant-name", default=None)
    parser.add_argument("--soil", required=True,
                        help="Delimited soil file")
    parser.add_argument("--soil-name", default=None)
    parser.add_argument("--max-depth", type=float, default=2.0,
                        help="Maximum soil depth (m)")
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lon", type=float, required=True)
    parser.add_argument("--alt", type=float, default=None)
    parser.add_argument("--seed-date", type=date.fromisoformat, required=True)
    parser.add_argument("--harvest-date", type=date.fromisoformat, required=True)
    parser.add_argument("--start", type=date.fromisoformat, default=None)
    parser.add_argument("--end", type=date.fromisoformat, default=None)
    parser.add_argument("--auto-irrigation", action="store_true",
                        help="Enable automatic irrigation")
    parser.add_argument("--auto-method", default="sprinkler")
    parser.add_argument("--auto-level", type=float, default=0.0)
    parser.add_argument("--auto-cutoff", type=float, default=1.0)
    parser.add_argument("--auto-amount", type=float, default=0.0)
    parser.add_argument("--config", default=None,
                        help="YAML configuration file")
    parser.add_argument("--daily-out", default=None,
                        help="Write daily values to this CSV path")

    args = parser.parse_args(argv)

    config = SimulationConfig.from_yaml(args.config) if args.config else get_config()
    configure_logging(config)

    auto_irrigation = None
    if args.auto_irrigation:
        auto_irrigation = AutoIrrigationControl(
            level=args.auto_level,
            cutoff=args.auto_cutoff,
            amount=args.auto_amount,
            method=get_irrigation_method(args.auto_method),
        )

    simulation_args = SimulationArgs(
        location=Location(latitude=args.lat, longitude=args.lon, altitude_m=args.alt),
        climate=load_climate_csv(args.climate, args.station),
        plant=load_plant_csv(args.plant, args.plant_name),
        soil=load_soil_csv(args.soil, args.soil_name, max_depth=args.max_depth),
        seed_date=args.seed_date,
        harvest_date=args.harvest_date,
        start_date=args.start,
        end_date=args.end,
        auto_irrigation=auto_irrigation,
    )

    result = simulate(simulation_args, keep_daily_values=args.daily_out is not None, config=config)

    if args.daily_out:
        result.to_dataframe().to_csv(args.daily_out)

    print("Summary:")
    for k, v in result.summary().items():
        print(f"  {k}: {v:.6g}" if isinstance(v, float) else f"  {k}: {v}")

    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
