from .decode import decode_node
from .profile import profile_node
from .summary import narrative_summary_node, structured_insight_node
from .export import export_table_node
from .finalize import finalize_node

__all__ = [
    "decode_node",
    "profile_node",
    "narrative_summary_node",
    "structured_insight_node",
    "export_table_node",
    "finalize_node",
]
