"""
Automatic irrigation policy.

Decides once per day, from the root zone saturation, whether to irrigate
and how much. Saturation is the available water left as a fraction of
TAW, (TAW - Dr) / TAW.
"""

import logging
from dataclasses import dataclass

from cropwater.data.contracts import AutoIrrigationControl

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IrrigationDecision:
    """Outcome of one policy evaluation"""
    gross: float = 0.0  # mm applied
    net: float = 0.0  # mm reaching the wetted soil
    saturation: float = 0.0
    threshold: float = 0.0

    @property
    def triggered(self) -> bool:
        return self.gross > 0


NO_IRRIGATION = IrrigationDecision()


class AutoIrrigationPolicy:
    """
    Saturation-triggered irrigation.

    Trigger modes:
    - level > 0: irrigate when saturation < level
    - level == 0: irrigate when saturation < 1 - p_adj - deficit, i.e. as
      soon as the crop would start to suffer water stress

    A fixed amount is a gross dose. Without a fixed amount the net dose
    raises the saturation to the cutoff, less the net irrigation already
    scheduled for the day. Gross doses are limited to the method's
    daily minimum and maximum.
    """

    def __init__(self, control: AutoIrrigationControl):
        self.control = control
        self.method = control.method

    def threshold(self, p_adj: float) -> float:
        """Saturation below which irrigation is triggered"""
        if self.control.level > 0:
            return self.control.level
        return 1.0 - p_adj - self.control.deficit

    def evaluate(
        self,
        dr_rz: float,
        taw_rz: float,
        p_adj: float,
        development_day: int,
        is_fallow: bool = False,
        net_irrigation: float = 0.0,
    ) -> IrrigationDecision:
        """
        Irrigation demand for one day.

        Args:
            dr_rz: Root zone depletion at the start of the day (mm)
            taw_rz: Total available water of the root zone (mm)
            p_adj: Adjusted depletion fraction of the day
            development_day: Development day, checked against the window
            is_fallow: No irrigation on fallow land
            net_irrigation: Net scheduled irrigation of the day (mm)

        Returns:
            IrrigationDecision, gross and net are 0 when not triggered
        """
        if is_fallow or taw_rz <= 0 or not self.control.is_active(development_day):
            return NO_IRRIGATION

        saturation = (taw_rz - dr_rz) / taw_rz
        threshold = self.threshold(p_adj)
        if saturation >= threshold:
            return IrrigationDecision(saturation=saturation, threshold=threshold)

        fw = self.method.fw
        if self.control.amount > 0:
            gross = self.control.amount
        else:
            net = 0.0
            if saturation < self.control.cutoff:
                net = max(0.0, (self.control.cutoff - saturation) * taw_rz - net_irrigation)
            gross = net / fw

        if gross > 0:
            if self.method.min_amount and gross < self.method.min_amount:
                gross = self.method.min_amount
            if self.method.max_amount and gross > self.method.max_amount:
                gross = self.method.max_amount

        return IrrigationDecision(
            gross=gross,
            net=gross * fw,
            saturation=saturation,
            threshold=threshold,
        )
