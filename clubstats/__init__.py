from clubstats.main import derive
from clubstats.models.match_model import DeriveConfig, DerivedView

__all__ = ["derive", "DeriveConfig", "DerivedView"]
