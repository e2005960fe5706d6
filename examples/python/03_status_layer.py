"""Status layer: the same operations without exceptions.

This example shows:
- Calling the core functions directly on a raw record
- Checking Status codes instead of catching exceptions
- Converting a Status into an exception with hcbuf.check()
"""

import struct

import hcbuf
from hcbuf import Status
from hcbuf.array import core

vec = core.create(2, 4)

for value in (1, 2, 3):
    status = core.push_back(vec, struct.pack("<I", value))
    print(f"push_back({value}) -> {status.name}, capacity={vec.capacity}")

# push_at requires an existing slot; insert allows the end position
print(f"\npush_at(count)  -> {core.push_at(vec, vec.count, struct.pack('<I', 4)).name}")
print(f"insert(count)   -> {core.insert(vec, vec.count, struct.pack('<I', 4)).name}")

while True:
    status, raw = core.pop_back(vec)
    if status is Status.EMPTY:
        print("pop_back -> EMPTY")
        break
    print(f"pop_back -> {struct.unpack('<I', raw)[0]}")

try:
    hcbuf.check(core.pop_at(vec, 0)[0], index=0)
except hcbuf.OutOfBoundsError as e:
    print(f"\n{e.code}: {e} {e.details}")

core.destroy(vec)
