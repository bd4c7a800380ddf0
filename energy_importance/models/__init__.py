"""Stage records passed between pipeline steps."""

from .records import EngineeredFeatures, RawObservations, TrainTestSplit

__all__ = ["EngineeredFeatures", "RawObservations", "TrainTestSplit"]
