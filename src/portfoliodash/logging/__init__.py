from .config import ProfessionalFormatter, configure_logging, verbosity_to_level

__all__ = ["ProfessionalFormatter", "configure_logging", "verbosity_to_level"]
