from .estimator import DEFAULT_FACTORS, Co2Factors, estimate_co2, with_co2

__all__ = ["Co2Factors", "DEFAULT_FACTORS", "estimate_co2", "with_co2"]
