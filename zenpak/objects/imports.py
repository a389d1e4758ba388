"""
Import Resolver

Converts a legacy, index-addressed import table into IO Store object
references. Each legacy import names an object and points at its outer via
a package index (negative values are imports, -1 being the first one).
Walking the outer chain yields a path such as "/Script/Engine/Actor" or
"/Game/Props/Crate/Crate_C", which is then hashed into a ScriptImport or
PackageImport. Imports with no outer are the packages themselves and become
null references.
"""

from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence

from zenpak.errors import ResolutionError
from zenpak.utils import ByteOrder, logDebug
from .names import FName, NameMap
from .object_index import Empty, ObjectReference, PackageImport, ScriptImport, write_reference_list

SCRIPT_ROOT = "/Script/"


@dataclass
class LegacyImport:
    """FObjectImport entry of a legacy package."""
    class_package: FName
    class_name: FName
    outer_index: int
    object_name: FName

    @property
    def is_package(self) -> bool:
        return self.outer_index == 0

    def object_path(self, names: NameMap, import_map: Sequence['LegacyImport']) -> str:
        """
        Build the '/'-separated path of this import.

        Raises:
            ValueError / IndexError: if the outer chain is malformed
        """
        parts = [names.resolve(self.object_name)]
        outer = self.outer_index
        visited = 0

        while outer != 0:
            if outer > 0:
                raise ValueError(f"import outer {outer} points into the export map")
            outer_pos = -outer - 1
            if outer_pos >= len(import_map):
                raise IndexError(f"outer import {outer_pos} out of range [0, {len(import_map)})")
            visited += 1
            if visited > len(import_map):
                raise ValueError("outer chain loops")
            entry = import_map[outer_pos]
            parts.append(names.resolve(entry.object_name))
            outer = entry.outer_index

        root = parts[-1]
        if not root.startswith("/"):
            raise ValueError(f"root package '{root}' is not a mounted path")
        return "/".join([root] + parts[-2::-1])

    def resolve(self, names: NameMap, import_map: Sequence['LegacyImport']) -> ObjectReference:
        """Resolve to the hash-addressed reference IO Store uses."""
        if self.is_package:
            # Package entries are addressed by package id, not through the import map
            names.resolve(self.object_name)
            return Empty()

        path = self.object_path(names, import_map)
        if path.startswith(SCRIPT_ROOT):
            return ScriptImport(path)
        return PackageImport(path)


def resolve_imports(import_map: Sequence[LegacyImport], names: NameMap,
                    package: Optional[str] = None) -> List[ObjectReference]:
    """
    Resolve every entry of a legacy import table.

    Args:
        import_map: Legacy import table, in table order
        names: Name map of the same package
        package: Package name used in error messages

    Returns:
        One object reference per import, same order

    Raises:
        ResolutionError: on the first entry that cannot be resolved
    """
    resolved = []
    for i, entry in enumerate(import_map):
        try:
            resolved.append(entry.resolve(names, import_map))
        except (ValueError, IndexError) as e:
            raise ResolutionError("import", i, entry, str(e), package) from e

    logDebug(f"Resolved {len(resolved)} imports" + (f" for {package}" if package else ""))
    return resolved


def write_import_map(writer: BinaryIO, imports: Sequence[ObjectReference], order: ByteOrder):
    """Serialize the import map: one 64-bit reference per import."""
    write_reference_list(writer, imports, order)
