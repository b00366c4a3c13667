from core.dbml_parser import parse_dbml  # noqa: F401
from core.sample_values import sample_value, sample_body  # noqa: F401
from core.collection_builder import build_collection  # noqa: F401
from core.ai_collection_builder import build_ai_collection  # noqa: F401
from core.selection import TableSelection  # noqa: F401
