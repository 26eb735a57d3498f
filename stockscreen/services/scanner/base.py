"""
Alert Detector Base Classes.

This module defines the core abstractions for breakout/alert detection and
the result types produced by the scanner.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from stockscreen.services.data_provider.models import StockQuote
from .indicators import IndicatorSnapshot


class Severity(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class SignalKind(str, Enum):
    ABOVE_50MA = "above_50ma"
    BELOW_50MA = "below_50ma"
    ABOVE_200MA = "above_200ma"
    BELOW_200MA = "below_200ma"
    GOLDEN_CROSS = "golden_cross"
    DEATH_CROSS = "death_cross"
    NEW_52W_HIGH = "new_52w_high"
    NEAR_52W_HIGH = "near_52w_high"
    NEW_52W_LOW = "new_52w_low"
    NEAR_52W_LOW = "near_52w_low"
    RSI_OVERSOLD = "rsi_oversold"
    RSI_APPROACHING_OVERSOLD = "rsi_approaching_oversold"
    RSI_APPROACHING_OVERBOUGHT = "rsi_approaching_overbought"
    RSI_OVERBOUGHT = "rsi_overbought"
    HIGH_VOLUME = "high_volume"
    MACD_BULLISH_CROSS = "macd_bullish_cross"
    MACD_BEARISH_CROSS = "macd_bearish_cross"
    MACD_STRONG_BULLISH = "macd_strong_bullish"
    MACD_STRONG_BEARISH = "macd_strong_bearish"
    STRONG_TECHNICALS = "strong_technicals"


@dataclass(frozen=True)
class Signal:
    kind: SignalKind
    severity: Severity
    label: str
    description: str
    category: str = "other"


@dataclass
class SignalResult:
    """Result of alert detection.

    Attributes:
        triggered: Whether the alert fired
        signal: The emitted Signal when triggered
        metadata: Optional additional data (score, reason, etc.)
    """
    triggered: bool
    signal: Optional[Signal] = None
    metadata: Optional[Dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class ScanContext:
    """Everything a detector may look at for one symbol."""
    quote: StockQuote
    tech: IndicatorSnapshot
    macd_type: Optional[str] = None
    ma_crossover: Optional[str] = None


@dataclass(frozen=True)
class AlertResult:
    symbol: str
    name: str
    market: str
    price: float
    change_percent: float
    relative_volume: float
    signal: Signal
    rsi: Optional[float] = None
    macd_signal_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["signal"]["kind"] = self.signal.kind.value
        data["signal"]["severity"] = self.signal.severity.value
        return data


class AlertDetector(ABC):
    """Base class for all alert detectors.

    Detectors are registered with @AlertRegistry.register and evaluated
    independently; several may fire for one symbol.

    Class Attributes:
        alert_id: Unique identifier for the detector (required)
        display_name: Human-readable name
        icon: Emoji icon for display
        category: Alert category (52w_highs, ma_crossover, rsi_signals, ...)
        enabled: Whether the detector is active
        min_bars: Minimum data history required (days)
        priority: Execution order (lower = earlier)
        fallback: Only evaluated when no regular detector fired

    Example:
        @AlertRegistry.register
        class MyAlert(AlertDetector):
            alert_id = "my_alert"
            display_name = "My Alert"
            category = "momentum"

            def detect(self, ctx):
                return SignalResult(triggered=False)
    """

    alert_id: str = ""
    display_name: str = ""
    icon: str = "•"
    category: str = "other"
    enabled: bool = True
    min_bars: int = 2
    priority: int = 100
    fallback: bool = False

    @abstractmethod
    def detect(self, ctx: ScanContext) -> SignalResult:
        """Detect the alert for one symbol.

        Args:
            ctx: ScanContext with quote, indicators and classified states

        Returns:
            SignalResult with triggered state and the emitted Signal
        """
        pass

    def emit(
        self,
        kind: SignalKind,
        severity: Severity,
        description: str,
        label: Optional[str] = None,
        **metadata: Any,
    ) -> SignalResult:
        signal = Signal(
            kind=kind,
            severity=severity,
            label=label or self.display_name,
            description=description,
            category=self.category,
        )
        return SignalResult(triggered=True, signal=signal, metadata=metadata)

    def __repr__(self) -> str:
        return f"<Alert:{self.alert_id}>"

    def __str__(self) -> str:
        return f"{self.icon} {self.display_name}"
