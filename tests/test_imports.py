import io

import pytest

from zenpak.errors import ResolutionError
from zenpak.objects import (
    Empty,
    FName,
    GameIdentity,
    LegacyImport,
    NameMap,
    PackageImport,
    ScriptImport,
    encode_reference,
    resolve_imports,
    write_import_map,
)
from zenpak.utils import ByteOrder

NAMES = NameMap([
    "/Script/Engine",      # 0
    "/Script/CoreUObject", # 1
    "Package",             # 2
    "Class",               # 3
    "StaticMesh",          # 4
    "/Game/Props/Crate",   # 5
    "Crate_C",             # 6
    "BlueprintGeneratedClass",  # 7
    "Default__Crate_C",    # 8
])


def package(name_index):
    return LegacyImport(FName(1), FName(2), 0, FName(name_index))


def child(outer, class_name, name_index):
    return LegacyImport(FName(1), FName(class_name), outer, FName(name_index))


def test_name_map_numbers():
    assert NAMES.resolve(FName(6)) == "Crate_C"
    assert NAMES.resolve(FName(6, 1)) == "Crate_C_0"
    assert NAMES.resolve(FName(6, 3)) == "Crate_C_2"
    with pytest.raises(IndexError):
        NAMES.resolve(FName(99))


def test_mapped_name_packing():
    assert FName(5, 2).to_mapped_name() == 5 | (2 << 32)
    assert FName.from_mapped_name(5 | (2 << 32)) == FName(5, 2)


def test_game_identity_package_path():
    game = GameIdentity("Game/")
    assert game.package_path("Characters\\Hero.uasset") == "/Game/Characters/Hero"
    assert game.package_path("/Maps/Level") == "/Game/Maps/Level"


def test_resolves_script_and_package_imports():
    import_map = [
        package(0),                 # -1 /Script/Engine
        child(-1, 3, 4),            # /Script/Engine/StaticMesh
        package(5),                 # -3 /Game/Props/Crate
        child(-3, 7, 6),            # -4 /Game/Props/Crate/Crate_C
        child(-4, 6, 8),            # /Game/Props/Crate/Crate_C/Default__Crate_C
    ]
    resolved = resolve_imports(import_map, NAMES)

    assert resolved[0] == Empty()
    assert resolved[1] == ScriptImport("/Script/Engine/StaticMesh")
    assert resolved[2] == Empty()
    assert resolved[3] == PackageImport("/Game/Props/Crate/Crate_C")
    assert resolved[4] == PackageImport("/Game/Props/Crate/Crate_C/Default__Crate_C")


def test_unresolvable_name_reports_index_and_entry():
    bad = child(-1, 3, 42)
    with pytest.raises(ResolutionError) as info:
        resolve_imports([package(0), bad], NAMES, package="/Game/Props/Crate")

    err = info.value
    assert err.kind == "import"
    assert err.index == 1
    assert err.raw is bad
    assert err.package == "/Game/Props/Crate"
    assert "import 1" in str(err)


def test_outer_out_of_range_is_fatal():
    with pytest.raises(ResolutionError) as info:
        resolve_imports([child(-5, 3, 4)], NAMES)
    assert info.value.index == 0


def test_outer_pointing_at_export_is_fatal():
    with pytest.raises(ResolutionError):
        resolve_imports([child(2, 3, 4)], NAMES)


def test_outer_loop_is_fatal():
    looping = [child(-2, 3, 4), child(-1, 3, 4)]
    with pytest.raises(ResolutionError):
        resolve_imports(looping, NAMES)


def test_root_must_be_a_mounted_path():
    import_map = [package(4), child(-1, 3, 6)]
    with pytest.raises(ResolutionError):
        resolve_imports(import_map, NAMES)


def test_write_import_map():
    refs = resolve_imports([package(0), child(-1, 3, 4)], NAMES)
    buffer = io.BytesIO()
    write_import_map(buffer, refs, ByteOrder.LITTLE)
    data = buffer.getvalue()

    assert len(data) == 16
    assert data[:8] == b'\xff' * 8
    assert int.from_bytes(data[8:], 'little') == encode_reference(ScriptImport("/Script/Engine/StaticMesh"))
