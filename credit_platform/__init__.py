"""Credit Analysis Workbench: Form II / Form III ratio derivation engine."""
from .types import *
from .formatting import *
from .config import CreditAnalysisConfig, DEFAULT_CONFIG, DEFAULT_YEARS
from .derivation import compute_credit_analysis
from .session import CreditAnalysisSession, StatementSnapshot
