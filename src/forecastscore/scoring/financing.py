"""Leverage model shared by the binary and continuous calculators.

An ROI score is a return multiplier. Equity earns it with no strings
attached; debt earns it too but always pays a fixed servicing cost on the
principal, win or lose.
"""

from __future__ import annotations

from forecastscore.models.metrics import MetricBundle

DEBT_SERVICE_RATE = 0.1
# A financed bet that only breaks even is booked as a full loss on the debt leg.
BREAKEVEN_ROF_PCT = -1.0


def debt_repayment(debt_financing: float) -> float:
    return debt_financing * -DEBT_SERVICE_RATE


def return_on_financing_pct(rof: float | None, debt_financing: float) -> float | None:
    if rof is None:
        return None
    if debt_financing > 0:
        ratio = rof / debt_financing
        return BREAKEVEN_ROF_PCT if ratio == 0 else ratio
    return BREAKEVEN_ROF_PCT


def apply_financing(
    bundle: MetricBundle,
    roi_score: float | None,
    equity_investment: float,
    debt_financing: float,
    estimated_time: float,
) -> MetricBundle:
    """Fill the investment fields of ``bundle`` from an ROI score.

    ``total_investment`` and ``debt_repayment`` only depend on the amounts and
    are set even when ``roi_score`` is None.
    """
    bundle.roi_score = roi_score
    bundle.total_investment = equity_investment + debt_financing

    roe = equity_investment * roi_score if roi_score is not None else None
    bundle.roe = roe
    bundle.roe_pct = roe / equity_investment if roe is not None and equity_investment > 0 else None

    gross = debt_financing * roi_score if roi_score is not None else None
    repayment = debt_repayment(debt_financing)
    rof = gross + repayment if gross is not None else None
    bundle.financing_gross_profit = gross
    bundle.debt_repayment = repayment
    bundle.rof = rof
    bundle.rof_pct = return_on_financing_pct(rof, debt_financing)

    net = roe + rof if roe is not None and rof is not None else None
    bundle.net_profit_equity_plus_debt = net
    bundle.roi_equity_plus_debt_pct = (
        net / equity_investment if net is not None and equity_investment > 0 else None
    )

    hours = estimated_time / 60
    bundle.profit_per_hour = net / hours if net is not None and hours > 0 else None
    return bundle
