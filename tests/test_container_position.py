import io
import struct

import pytest

from zenpak.parsers import is_legacy_cooked_asset, is_valid_asset_type
from zenpak.serialization import ContainerLayout, ContainerPositionKind, get_container_position
from zenpak.utils import ByteOrder, align_up


def test_fixed_position():
    position = get_container_position(ContainerPositionKind.FIXED)
    layout = ContainerLayout(files_size=0x123456)
    assert position.cursor_to_header(layout) == 0
    assert position.cursor_to_beginning_of_files(layout) == 0x10000


def test_trailing_position_aligns_to_block_size():
    position = get_container_position(ContainerPositionKind.TRAILING)
    assert position.cursor_to_beginning_of_files(ContainerLayout(0x100)) == 0
    assert position.cursor_to_header(ContainerLayout(0x10001, 0x10000)) == 0x20000
    assert position.cursor_to_header(ContainerLayout(0x20000, 0x10000)) == 0x20000
    assert position.cursor_to_header(ContainerLayout(0, 0x10000)) == 0


def test_align_up_rejects_bad_alignment():
    assert align_up(5, 4) == 8
    with pytest.raises(ValueError):
        align_up(5, 0)


def test_detects_cooked_uasset():
    reader = io.BytesIO(struct.pack('<I', 0x9E2A83C1) + b'\x00' * 12)
    reader.seek(0)
    assert is_legacy_cooked_asset(reader)
    assert reader.tell() == 0
    assert not is_valid_asset_type(reader)


def test_io_store_header_is_valid():
    reader = io.BytesIO(b'\x00' * 16)
    assert is_valid_asset_type(reader)
    assert is_valid_asset_type(io.BytesIO(b'\x01'))


def test_magic_respects_byte_order():
    reader = io.BytesIO(struct.pack('>I', 0x9E2A83C1))
    assert is_legacy_cooked_asset(reader, ByteOrder.BIG)
    assert not is_legacy_cooked_asset(reader, ByteOrder.LITTLE)
