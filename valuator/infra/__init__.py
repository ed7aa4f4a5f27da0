"""valuator.infra -- runtime configuration."""

from valuator.infra.config import TemporalConfig as TemporalConfig
from valuator.infra.config import ValuationConfig as ValuationConfig
from valuator.infra.config import configure_logging as configure_logging
from valuator.infra.config import load_config as load_config
