"""
Daily water balance simulation of one field from seeding to harvest.

Per simulated day:
1. Development day and plant, soil and climate inputs
2. Reference ET, adjusted Kcb, potential transpiration and p
3. Scheduled and automatic irrigation, canopy interception
4. Water stress, soil evaporation
5. Zone resize after root growth, root and deep zone balance
6. Efficiencies and yield response
"""
import logging
import time
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Tuple

from cropwater.core.config import SimulationConfig, get_config
from cropwater.core.exceptions import (
    ConfigurationError, CropwaterError, ErrorContext, MissingDataError, handle_exception
)
from cropwater.core.types import Climate, FieldID, Location, Plant, Soil, SoilLayerProperties
from cropwater.data.contracts import AutoIrrigationControl, IrrigationSchedule
from cropwater.physics.evaporation import soil_evaporation, total_evaporable_water
from cropwater.physics.irrigation import AutoIrrigationPolicy, NO_IRRIGATION
from cropwater.physics.reference_et import Et0Method, Et0Result, reference_et
from cropwater.physics.soil_reservoir import (
    SoilWaterState, deep_zone_balance, initial_soil_state,
    redistribute_zone_change, root_zone_balance, total_available_water,
)
from cropwater.physics.solar import extraterrestrial_radiation
from cropwater.physics.transpiration import (
    calculate_Kcb_adjusted, calculate_Ks, calculate_p_adjusted, canopy_interception
)
from cropwater.pipeline.results import CumulativeResult, DailyResult

logger = logging.getLogger(__name__)


@dataclass
class SimulationArgs:
    """Inputs of one simulation run"""
    location: Location
    climate: Climate
    plant: Plant
    soil: Soil
    seed_date: date
    harvest_date: date
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    irrigation_schedule: Optional[IrrigationSchedule] = None
    auto_irrigation: Optional[AutoIrrigationControl] = None
    field_id: Optional[FieldID] = None


class WaterBalanceDriver:
    """
    Runs the daily loop for one field.

    The driver owns its soil water state: a prior state is copied on
    entry and never modified. Errors end the run and are reported on the
    result, days already simulated stay accumulated.
    """

    def __init__(self, args: SimulationArgs, config: Optional[SimulationConfig] = None):
        self.args = args
        self.config = config or get_config()
        self.policy = AutoIrrigationPolicy(args.auto_irrigation) if args.auto_irrigation else None
        self.taw_max = 0.0
        self._setup_logging()

    def _setup_logging(self):
        """Configure driver-specific logging"""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _context(self, day: Optional[date] = None, operation: Optional[str] = None) -> ErrorContext:
        return ErrorContext(
            field_id=self.args.field_id,
            date=day.isoformat() if day else None,
            component="driver",
            operation=operation,
        )

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def _validate(self) -> Tuple[date, date]:
        """Check collaborators and clamp the run range to the season"""
        args = self.args
        for name in ("location", "climate", "plant", "soil", "seed_date", "harvest_date"):
            if getattr(args, name) is None:
                raise ConfigurationError(f"{name} is required", self._context(operation="validate"))

        if args.seed_date >= args.harvest_date:
            raise ConfigurationError(
                f"Seed date {args.seed_date} must be before harvest date {args.harvest_date}",
                self._context(operation="validate"),
            )

        start = max(args.start_date or args.seed_date, args.seed_date)
        end = min(args.end_date or args.harvest_date, args.harvest_date)
        if start > end:
            raise ConfigurationError(
                f"Range {args.start_date} to {args.end_date} lies outside the season "
                f"{args.seed_date} to {args.harvest_date}",
                self._context(operation="validate"),
            )
        return start, end

    def _soil_properties(self, depth: float, day: Optional[date] = None) -> SoilLayerProperties:
        props = self.args.soil.get_layer_properties(depth)
        if props is None:
            raise MissingDataError(f"No soil properties at depth {depth:.2f} m", self._context(day, "soil"))
        return props

    def _initial_state(self, prior_state: Optional[SoilWaterState]) -> SoilWaterState:
        """Copy of the prior state, or a new state at the rooting depth of day 1"""
        max_depth = self.args.soil.max_depth
        self.taw_max = total_available_water(self._soil_properties(max_depth), max_depth)

        if prior_state is not None:
            self.logger.debug(f"Continuing from prior state at zr={prior_state.zr:.2f} m")
            return prior_state.copy()

        params = self.args.plant.get_stage_parameters(1)
        if params is None:
            raise MissingDataError("No plant parameters for development day 1", self._context(operation="initialize"))

        zr = min(max_depth, params.zr)
        props = self._soil_properties(zr)
        taw_rz = total_available_water(props, zr)
        return initial_soil_state(
            zr=zr,
            taw_rz=taw_rz,
            taw_dz=max(0.0, self.taw_max - taw_rz),
            tew=total_evaporable_water(props, self.config.default_evaporation_layer_depth_m),
            fraction_rz=self.config.initial_depletion_rz,
            fraction_dz=self.config.initial_depletion_dz,
            fraction_de=self.config.initial_depletion_de,
        )

    # =========================================================================
    # DAILY STEP
    # =========================================================================

    def _reference_et(self, record, day: date) -> Et0Result:
        """Computed ET0, falling back to the record's precomputed value"""
        config = self.config
        result = None
        if not (config.use_precomputed_et0 and record.et0 is not None):
            result = reference_et(
                record, self.args.location, day, config.penman_monteith, config.hargreaves
            )
        if result is None and record.et0 is not None:
            ra = extraterrestrial_radiation(day, self.args.location.latitude).ra
            result = Et0Result(et0=max(0.0, record.et0), ra=ra, method=Et0Method.PRECOMPUTED)
        if result is None:
            raise MissingDataError("Neither temperatures nor ET0 available", self._context(day, "reference_et"))
        return result

    def _simulate_day(self, day: date, state: SoilWaterState, result: CumulativeResult,
                      keep_daily_values: bool):
        args = self.args
        config = self.config
        eps = config.epsilon

        development_day = args.plant.get_development_day(day, args.seed_date, args.harvest_date)
        if development_day is None:
            self.logger.debug(f"{day} outside the plant calendar, skipped")
            return

        params = args.plant.get_stage_parameters(development_day)
        if params is None:
            raise MissingDataError(
                f"No plant parameters for development day {development_day}", self._context(day, "plant")
            )
        record = args.climate.get_daily_record(day)
        if record is None:
            raise MissingDataError(
                f"No climate data for {day} at station '{args.climate.name}'", self._context(day, "climate")
            )

        max_depth = args.soil.max_depth
        zr = min(max_depth, params.zr)
        props = self._soil_properties(zr, day)
        taw_rz = total_available_water(props, zr)
        taw_dz = max(0.0, self.taw_max - taw_rz)
        tew = total_evaporable_water(props, config.default_evaporation_layer_depth_m)

        windspeed = record.windspeed if record.windspeed is not None else config.penman_monteith.default_windspeed
        humidity = record.humidity if record.humidity is not None else config.default_humidity
        height = params.height or 0.0

        # Reference ET and crop demand
        et0 = self._reference_et(record, day)
        kcb_adj = calculate_Kcb_adjusted(params.kcb, params.stage, windspeed, humidity, height)
        t = et0.et0 * kcb_adj
        p_adj = calculate_p_adjusted(params.p, t)

        # Irrigation
        schedule = args.irrigation_schedule
        irrigation = schedule.amount_on(day) if schedule else 0.0
        net_irrigation = irrigation * schedule.method.fw if schedule else 0.0

        decision = NO_IRRIGATION
        if self.policy is not None:
            decision = self.policy.evaluate(
                state.dr_rz, taw_rz, p_adj, development_day, params.is_fallow, net_irrigation
            )
            if decision.triggered:
                result.auto_irrigation_schedule.add(day, decision.gross)
                self.logger.debug(
                    f"{day}: auto irrigation {decision.gross:.2f} mm at saturation {decision.saturation:.3f}"
                )

        # Interception and net input
        precipitation = record.effective_precipitation(config.use_pattern_precipitation)
        a = config.interception_a
        interception = canopy_interception(precipitation, params.lai, a)
        interception_irr = 0.0
        if schedule:
            interception_irr = canopy_interception(net_irrigation, params.lai, a) * schedule.method.interception
        interception_auto = 0.0
        if self.policy is not None:
            interception_auto = canopy_interception(decision.net, params.lai, a) * self.policy.method.interception
        net_precipitation = max(
            0.0,
            precipitation - interception + net_irrigation - interception_irr + decision.net - interception_auto,
        )

        # Water stress on the depletion of the previous day
        ks = calculate_Ks(taw_rz, state.dr_rz, p_adj, params.is_fallow)
        t_act = t * ks
        if t_act < eps:
            t_act = 0.0

        # Soil evaporation
        fws = [m.fw for m in (schedule.method if schedule else None,
                              self.policy.method if self.policy else None) if m is not None]
        drip = (
            (net_irrigation > 0 and schedule.method.is_drip)
            or (decision.net > 0 and self.policy.method.is_drip)
        )
        evaporation = soil_evaporation(
            state,
            params.kcb,
            et0.et0,
            tew,
            net_precipitation,
            fw=min(fws) if fws else 1.0,
            drip_irrigation=drip,
            is_fallow=params.is_fallow,
            u2=windspeed,
            RH_min=humidity,
            crop_height_m=height,
            e_factor=config.e_factor,
        )
        e = evaporation.e if evaporation.e >= eps else 0.0

        # Soil zones
        dr_prev = state.dr_rz
        dr_start = state.total_depletion
        if zr != state.zr:
            resize = redistribute_zone_change(state, zr, taw_rz, taw_dz, max_depth)
            self.logger.debug(f"{day}: zr {zr:.2f} m, moved {resize.moved_to_rz:.3f} mm into root zone")
        else:
            state.taw_rz = taw_rz
            state.taw_dz = taw_dz

        rz = root_zone_balance(state, net_precipitation, e, t_act)
        dz = deep_zone_balance(state, rz.dp)
        if rz.exceed > 0:
            self.logger.debug(f"{day}: root zone depletion exceeded TAW by {rz.exceed:.3f} mm")
        dr_diff = state.total_depletion - dr_start

        # Efficiencies
        water_input = precipitation + net_irrigation + decision.net
        prec_irr_efficiency = (net_precipitation - dz.dp) / water_input if water_input > 0 else 0.0
        soil_storage_efficiency = 0.0
        if round(dr_prev, 5) != 0:
            soil_storage_efficiency = (net_precipitation - rz.dp) / dr_prev

        daily = DailyResult(
            date=day,
            development_day=development_day,
            stage=params.stage.value,
            zr=zr,
            et0=et0.et0,
            ra=et0.ra,
            et0_method=et0.method.value,
            precipitation=precipitation,
            irrigation=irrigation,
            net_irrigation=net_irrigation,
            auto_irrigation=decision.gross,
            net_auto_irrigation=decision.net,
            interception=interception,
            interception_irrigation=interception_irr,
            interception_auto_irrigation=interception_auto,
            net_precipitation=net_precipitation,
            kcb=params.kcb,
            kcb_adj=kcb_adj,
            t=t,
            t_act=rz.t_act,
            ks=ks,
            p_adj=p_adj,
            raw=taw_rz * p_adj,
            e=e,
            e_act=rz.e_act,
            few=evaporation.few,
            kr=evaporation.kr,
            ke=evaporation.ke,
            tew=tew,
            de=state.de,
            dpe=state.dpe,
            taw_rz=state.taw_rz,
            taw_dz=state.taw_dz,
            dr_rz=state.dr_rz,
            dr_dz=state.dr_dz,
            dp_rz=rz.dp,
            dp_dz=dz.dp,
            exceed_rz=rz.exceed,
            exceed_dz=dz.exceed,
            dr_diff=dr_diff,
            prec_irr_efficiency=prec_irr_efficiency,
            soil_storage_efficiency=soil_storage_efficiency,
            yield_reduction=params.ky * (1 - ks) if params.ky is not None else 0.0,
        )
        daily.balance_error = result.balance.add_timestep(
            water_input=water_input,
            interception=interception + interception_irr + interception_auto,
            evaporation=daily.e_act,
            transpiration=daily.t_act,
            drainage=dz.dp,
            depletion_change=dr_diff,
        )
        result.add(daily, ky=params.ky, keep_daily_values=keep_daily_values)

        self.logger.debug(
            f"{day}: day {development_day} {daily.stage} ET0={daily.et0:.2f} "
            f"E={daily.e_act:.2f} Tact={daily.t_act:.2f} Ks={ks:.3f} Dr={state.dr_rz:.2f}/{state.taw_rz:.2f}"
        )

    # =========================================================================
    # RUN
    # =========================================================================

    def run(
        self,
        prior_state: Optional[SoilWaterState] = None,
        keep_daily_values: bool = False,
        dry_run: bool = False,
        result: Optional[CumulativeResult] = None,
    ) -> CumulativeResult:
        """
        Simulate the configured range.

        Args:
            prior_state: Final state of a previous run to continue from
            keep_daily_values: Retain every DailyResult on the result
            dry_run: Compute everything but report the starting state as final state
            result: Result of a previous run to accumulate into

        Returns:
            CumulativeResult, its error is set if the run failed
        """
        result = result if result is not None else CumulativeResult()
        result.balance.tolerance_mm = self.config.balance_tolerance_mm
        result.error = None
        if self.policy is not None and result.auto_irrigation_schedule is None:
            result.auto_irrigation_schedule = IrrigationSchedule(method=self.policy.method)

        started = time.perf_counter()
        state = None
        start_state = None
        day = None
        try:
            start, end = self._validate()
            state = self._initial_state(prior_state)
            start_state = state.copy()

            self.logger.info(
                f"Simulating {self.args.field_id or 'field'} from {start} to {end}"
                f"{' (dry run)' if dry_run else ''}"
            )
            day = start
            while day <= end:
                self._simulate_day(day, state, result, keep_daily_values)
                day += timedelta(days=1)
        except CropwaterError as e:
            self.logger.error(str(e))
            result.error = str(e)
        except Exception as e:
            # Failures of caller-provided plant, soil or climate providers
            error = handle_exception(e, self._context(day, "run"))
            self.logger.exception(f"Simulation aborted: {error}")
            result.error = str(error)
        finally:
            if state is not None:
                result.final_state = start_state if dry_run else state
            result.finalize()
            result.runtime_ms += (time.perf_counter() - started) * 1000

        self.logger.info(
            f"Simulated {result.n_days} days in {result.runtime_ms:.1f} ms, "
            f"yield reduction {result.yield_reduction:.3f}"
        )
        return result


def simulate(
    args: SimulationArgs,
    prior_state: Optional[SoilWaterState] = None,
    keep_daily_values: bool = False,
    dry_run: bool = False,
    config: Optional[SimulationConfig] = None,
    result: Optional[CumulativeResult] = None,
) -> CumulativeResult:
    """
    Run one water balance simulation.

    Configuration and missing-data errors do not raise; they end the run
    and are reported in `result.error`.
    """
    driver = WaterBalanceDriver(args, config)
    return driver.run(
        prior_state=prior_state,
        keep_daily_values=keep_daily_values,
        dry_run=dry_run,
        result=result,
    )
