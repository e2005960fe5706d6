"""Text: in-place editing of NUL-terminated byte text.

This example shows:
- Cutting a substring and concatenating pieces
- Appending single characters
- Replacing every occurrence of a word
- Counting words
"""

from hcbuf import Text

TEXT_WITH_REPETITION = (
    "The sun rose over the hills. The sun warmed the valley, "
    "and by noon the sun was high. Everyone said the sun would stay."
)

world = Text("Hello, World!")
world.substring(7, 5)
print(f"substring: {world}")

greeting = Text("Hello, ")
greeting += world
greeting.append_char("!")
print(f"greeting:  {greeting}")

greeting += "\n" + TEXT_WITH_REPETITION
print(f"\n'sun' appears {greeting.occurrences('sun')} times")

replaced = greeting.replace("sun", "rain")
print(f"replaced {replaced} occurrences:\n{greeting}")

print(f"\nword count: {greeting.word_count()}")
print(f"length={len(greeting)} capacity={greeting.capacity}")

# Formatting and case helpers
line = Text.format("%-8s|%5.1f", "value", 3.14159)
line.to_upper()
print(f"\n{line}")

banner = Text.repeat("=", 20)
print(banner)

with Text("   padded   ") as padded:
    padded.trim()
    print(f"[{padded}]")
