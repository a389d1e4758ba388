"""
Constants used across the converter modules.

Consolidates fixed record sizes and sentinel values of the IO Store
header formats.
"""

# Serialized size of one FExportMapEntry (UE 4.25+ through 5.2)
EXPORT_MAP_ENTRY_SIZE = 0x48

# Fixed part of one package entry in the container header store
CONTAINER_HEADER_PACKAGE_SIZE = 0x20

# Byte offset of ImportedPackageCount inside the store entry;
# RelativeOffsetToImports is measured from here
STORE_ENTRY_IMPORTS_VIEW_OFFSET = 0x18

# Object reference tag lives in the top 2 bits
OBJECT_INDEX_TAG_SHIFT = 62
OBJECT_INDEX_HASH_MASK = (1 << OBJECT_INDEX_TAG_SHIFT) - 1
OBJECT_INDEX_NULL = 0xFFFFFFFFFFFFFFFF

# Magic at the start of a legacy cooked .uasset
UASSET_MAGIC = 0x9E2A83C1

# EObjectFlags::RF_Public
RF_PUBLIC = 0x00000001

# Early IO Store containers reserve a fixed block ahead of the file data
FIXED_CONTAINER_HEADER_SPLIT = 0x10000

# Default compression block size of a .ucas container
DEFAULT_COMPRESSION_BLOCK_SIZE = 0x10000
