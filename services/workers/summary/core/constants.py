from pathlib import Path

PHASE_ORDER = [
    "decode",
    "profile",
    "narrative_summary",
    "structured_insight",
    "export_table",
    "finalize",
]

FORMAT_DELIMITED = "delimited"
FORMAT_SPREADSHEET = "spreadsheet"

# Case-sensitive suffix match, first hit wins.
_EXTENSION_FORMATS = [
    (".csv", FORMAT_DELIMITED),
    (".xlsx", FORMAT_SPREADSHEET),
]

ARTIFACT_NARRATIVE = "narrative"
ARTIFACT_STRUCTURED_INSIGHT = "structuredInsight"
ARTIFACT_STATS_TABLE = "statsTable"

# kind -> (extension, content type), in persist order
ARTIFACT_FORMATS = {
    ARTIFACT_NARRATIVE: ("txt", "text/plain"),
    ARTIFACT_STRUCTURED_INSIGHT: ("json", "application/json"),
    ARTIFACT_STATS_TABLE: ("csv", "text/csv"),
}

ROWCOUNT_SENTINEL = "__ROWCOUNT__"
STATS_TABLE_HEADERS = ["Column", "Count", "Sum", "Avg", "Min", "Max"]

_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
_NARRATIVE_PROMPT_TEMPLATE_NAME = "narrative_prompt.txt.j2"
_STRUCTURED_PROMPT_TEMPLATE_NAME = "structured_prompt.txt.j2"
