from models.schema import Column, Table, Reference, Schema  # noqa: F401
from models.analysis import AnalysisDomain, AnalysisResult, AuthTableSpec, AnalyzeRequest, AnalyzeResponse  # noqa: F401
from models.collection import PostmanCollection, Folder, RequestLeaf  # noqa: F401
from models.imports import ImportSessionCreate, ImportSessionState, TablePreview  # noqa: F401
