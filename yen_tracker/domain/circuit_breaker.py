"""Circuit breaker - trips when unrealised loss reaches the configured threshold"""

from typing import List

from yen_tracker.domain.models import CircuitBreakerResult, ConversionRecord, StrategySettings
from yen_tracker.domain.portfolio import calculate_net_position, current_value_pence


def check_circuit_breaker(
    records: List[ConversionRecord],
    current_rate: float,
    settings: StrategySettings,
) -> CircuitBreakerResult:
    """
    Compare the value of held JPY against net GBP deployed.

    Triggered when the position is at a loss AND the loss is at least
    circuit_breaker_loss_pence. E.g. deployed £10k, threshold £5k: trips
    once the JPY is worth £5k or less.

    A current rate of 0 values the JPY at nothing, so the whole net
    deployed amount reads as a loss and can trip the breaker.
    """
    position = calculate_net_position(records)
    net_deployed = position.net_gbp_deployed

    value = current_value_pence(position.net_jpy_held, current_rate)
    loss = value - net_deployed  # negative = loss
    loss_pct = (loss / net_deployed) * 100 if net_deployed > 0 else 0.0
    threshold = settings.circuit_breaker_loss_pence

    triggered = loss < 0 and abs(loss) >= threshold

    if net_deployed == 0:
        message = "No conversions to monitor."
    elif triggered:
        message = (
            f"Circuit breaker triggered! Unrealised loss of £{abs(loss) / 100:.2f} "
            f"exceeds your £{threshold / 100:.2f} threshold. Consider pausing conversions."
        )
    elif loss < 0:
        message = (
            f"Unrealised loss of £{abs(loss) / 100:.2f} ({abs(loss_pct):.1f}%). "
            f"Circuit breaker at £{threshold / 100:.2f}."
        )
    else:
        message = f"Portfolio in profit. Circuit breaker at £{threshold / 100:.2f} loss threshold."

    return CircuitBreakerResult(
        triggered=triggered,
        current_loss=loss,
        threshold=threshold,
        loss_pct=loss_pct,
        message=message,
    )
