"""Allocation limits: bounded memory and out-of-memory handling.

This example shows:
- Capping live bytes with config.alloc_limit
- Handling OutOfMemoryError without losing data
- Inspecting allocator usage
"""

import hcbuf
from hcbuf import Array, config

config.alloc_limit = 256
allocator = config.allocator

arr = Array(8, 8)
try:
    while True:
        arr.push_back()
except hcbuf.OutOfMemoryError as e:
    print(f"Stopped at len={len(arr)} capacity={arr.capacity}: {e}")

print(f"in_use={allocator.in_use} peak={allocator.peak} failures={allocator.failures}")

# The array is intact after the failed growth
arr.pop_back()
print(f"after pop: len={len(arr)}")

arr.close()
print(f"after close: in_use={allocator.in_use}")

config.reset()
