__version__ = "0.1.0"

from .config import configure_parameters
from .model import Hierarchy, Node
from .matrix_builder import JudgmentMatrix
from .propagation import WeightPropagator
from .builder import HierarchyBuilder
from .aggregation import AlternativeAggregator
from .elicitation import JudgmentSource, ScriptedSource, LabelKind
from .pipeline import Workflow, DecisionResult
from .validation import Accepted, Rejected, Rejection

from .weight_derivation import register_weight_method
from .consistency import register_consistency_method
