"""
Name map and game identity.

The legacy package stores every identifier as an (index, number) pair into
its name map; a non-zero number appends "_<number - 1>" to the base text.
The IO Store export map keeps the pair as an FMappedName packed into 64 bits.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Sequence


@dataclass(frozen=True)
class FName:
    """Legacy name reference (name map index + instance number)."""
    index: int
    number: int = 0

    def to_mapped_name(self) -> int:
        """Pack as FMappedName: low 32 bits index, high 32 bits number."""
        return (self.index & 0xFFFFFFFF) | ((self.number & 0xFFFFFFFF) << 32)

    @classmethod
    def from_mapped_name(cls, value: int) -> 'FName':
        return cls(index=value & 0xFFFFFFFF, number=value >> 32)


class NameMap:
    """
    Name table of one legacy package.

    Usage:
        names = NameMap(["/Script/Engine", "Actor", "Default__Actor"])
        names.resolve(FName(1))       # "Actor"
        names.resolve(FName(1, 3))    # "Actor_2"
    """

    def __init__(self, names: Sequence[str]):
        self._names: List[str] = list(names)

    def __len__(self) -> int:
        return len(self._names)

    def get(self, index: int) -> str:
        if index < 0 or index >= len(self._names):
            raise IndexError(f"Name index {index} out of range [0, {len(self._names)})")
        return self._names[index]

    def resolve(self, name: FName) -> str:
        """Resolve an FName to its display text."""
        base = self.get(name.index)
        if name.number == 0:
            return base
        return f"{base}_{name.number - 1}"


class GameIdentity:
    """
    Builds fully qualified package paths for a game's content.

    Usage:
        game = GameIdentity("/Game")
        game.package_path("Characters/Hero.uasset")   # "/Game/Characters/Hero"
    """

    def __init__(self, root: str = "/Game"):
        self.root = "/" + root.strip("/")

    def package_path(self, file_name: str) -> str:
        path = PurePosixPath(file_name.replace("\\", "/").lstrip("/"))
        if path.suffix:
            path = path.with_suffix("")
        return f"{self.root}/{path.as_posix()}"
