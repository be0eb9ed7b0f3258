"""Word tags and cell kinds for the heap arena.

Every slot of a cell holds one tagged word: an int8 tag and an int64 payload.
The composite tags (PAIR, CLOSURE, FRAME) double as cell kinds; their payload
is the index of another cell. KIND_FREE marks an unallocated slot.
"""

TAG_NIL = 0
TAG_INTEGER = 1
TAG_BOOLEAN = 2
TAG_SYMBOL = 3
TAG_PAIR = 4
TAG_CLOSURE = 5
TAG_PRIMITIVE = 6
TAG_FRAME = 7

KIND_FREE = 0

# Tags whose payload points at another cell; the collector follows these.
REFERENCE_TAGS = (TAG_PAIR, TAG_CLOSURE, TAG_FRAME)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
