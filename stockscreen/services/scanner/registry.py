"""
Alert Registry - registration and lookup of alert detectors.

Provides a centralized registry for all alert detectors with:
- Decorator-based registration
- Lookup by ID or category
- Evaluation of every detector for one symbol
"""

from typing import Dict, List, Type, Optional
from .base import AlertDetector, ScanContext, Signal


class AlertRegistry:
    """Singleton registry for alert detectors.

    Usage:
        @AlertRegistry.register
        class MyAlert(AlertDetector):
            alert_id = "my_alert"
            ...

        detectors = AlertRegistry.get_all()
        signals = AlertRegistry.evaluate(ctx, bars=len(series))
    """

    _detectors: Dict[str, AlertDetector] = {}

    @classmethod
    def register(cls, detector_class: Type[AlertDetector]) -> Type[AlertDetector]:
        """Decorator to register an alert detector class.

        Raises:
            ValueError: If alert_id is missing or duplicate
        """
        instance = detector_class()

        if not instance.alert_id:
            raise ValueError(
                f"Alert {detector_class.__name__} must define alert_id"
            )

        if instance.alert_id in cls._detectors:
            raise ValueError(
                f"Duplicate alert_id: {instance.alert_id}"
            )

        cls._detectors[instance.alert_id] = instance
        return detector_class

    @classmethod
    def get_all(cls, enabled_only: bool = True) -> List[AlertDetector]:
        """Get all registered detectors sorted by priority."""
        detectors = list(cls._detectors.values())
        if enabled_only:
            detectors = [d for d in detectors if d.enabled]
        return sorted(detectors, key=lambda d: d.priority)

    @classmethod
    def get_by_id(cls, alert_id: str) -> Optional[AlertDetector]:
        return cls._detectors.get(alert_id)

    @classmethod
    def get_by_category(cls, category: str, enabled_only: bool = True) -> List[AlertDetector]:
        return [d for d in cls.get_all(enabled_only) if d.category == category]

    @classmethod
    def get_alert_ids(cls) -> List[str]:
        return list(cls._detectors.keys())

    @classmethod
    def count(cls) -> int:
        return len(cls._detectors)

    @classmethod
    def clear(cls) -> None:
        """Clear all registered detectors (for testing)."""
        cls._detectors.clear()

    @classmethod
    def evaluate(cls, ctx: ScanContext, bars: Optional[int] = None) -> List[Signal]:
        """Run every enabled detector against one symbol.

        Fallback detectors run only when no regular detector fired.

        Args:
            ctx: Symbol context
            bars: Length of the underlying series (skips detectors needing more)
        """
        detectors = cls.get_all(enabled_only=True)
        if bars is not None:
            detectors = [d for d in detectors if bars >= d.min_bars]

        signals = []
        for detector in detectors:
            if detector.fallback:
                continue
            result = detector.detect(ctx)
            if result.triggered and result.signal:
                signals.append(result.signal)

        if not signals:
            for detector in detectors:
                if not detector.fallback:
                    continue
                result = detector.detect(ctx)
                if result.triggered and result.signal:
                    signals.append(result.signal)

        return signals


# Convenience alias
registry = AlertRegistry
