"""
Table selection for the AI preview step.
An immutable value: every transition returns a new TableSelection, so the
selection used for a generation call can be kept and replayed as-is.
"""
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from models.analysis import AnalysisResult


class TableSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    all_table_names: tuple[str, ...] = ()
    selected: frozenset[str] = frozenset()
    search_filter: str = ""

    @classmethod
    def from_analysis(cls, all_table_names: Iterable[str], analysis: AnalysisResult) -> "TableSelection":
        """Seed the selection with every table the analysis did not skip."""
        names = tuple(all_table_names)
        skip = set(analysis.skip_tables)
        return cls(all_table_names=names, selected=frozenset(n for n in names if n not in skip))

    def select_all(self) -> "TableSelection":
        return self.model_copy(update={"selected": frozenset(self.all_table_names)})

    def deselect_all(self) -> "TableSelection":
        return self.model_copy(update={"selected": frozenset()})

    def toggle(self, name: str) -> "TableSelection":
        if name not in self.all_table_names:
            return self
        return self.model_copy(update={"selected": self.selected ^ {name}})

    def set_filter(self, text: str) -> "TableSelection":
        return self.model_copy(update={"search_filter": text or ""})

    def visible_tables(self) -> list[str]:
        query = self.search_filter.lower()
        return [n for n in self.all_table_names if query in n.lower()]

    def is_selected(self, name: str) -> bool:
        return name in self.selected

    def selected_names(self) -> list[str]:
        """Selected tables in schema order."""
        return [n for n in self.all_table_names if n in self.selected]
