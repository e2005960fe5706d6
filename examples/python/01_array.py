"""Arrays: typed elements, growth, and positional edits.

This example shows:
- Building an Array of packed int32 values
- How capacity grows as elements are appended
- Inserting and removing at positions
- Handing the live elements to NumPy without copying
"""

from hcbuf import Array

arr = Array(4, fmt="<i")
for value in range(6):
    arr.push_back(value * 10)
    print(f"pushed {value * 10:>3}: len={len(arr)} capacity={arr.capacity}")

# insert() accepts the end position, push_at() only existing slots
arr.insert(len(arr), 60)
arr.push_at(0, -10)
print(f"\nAfter edits: {arr.tolist()}")

print(f"pop_front -> {arr.pop_front()}")
print(f"pop_back  -> {arr.pop_back()}")
print(f"pop_at(2) -> {arr.pop_at(2)}")
print(f"Now:       {arr.tolist()}")

# Release unused slots
arr.shrink_to_fit()
print(f"\nAfter shrink_to_fit: capacity={arr.capacity}")

# Copies never share storage
snapshot = arr.copy()
arr[0] = 999
print(f"original={arr.tolist()} copy={snapshot.tolist()}")

# Untyped arrays hold raw byte records of a fixed size
records = Array(2, 3)
records.extend([b"abc", b"xyz"])
print(f"\nRaw records: {records.tolist()}")

try:
    import numpy as np
except ImportError:
    np = None

if np is not None:
    view = np.asarray(arr)
    view[1] = -1
    print(f"\nNumPy view: {view} -> array sees {arr[1]}")

arr.close()
snapshot.close()
records.close()
