from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RelationSchema:
    """
    Relation schema: relation name plus ordered (column name, column type) pairs.
    """
    name: str
    columns: tuple[tuple[str, str], ...]

    @property
    def arity(self) -> int:
        return len(self.columns)

    @property
    def colnames(self) -> tuple[str, ...]:
        return tuple(col for col, _ in self.columns)
