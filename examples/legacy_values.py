from enum import Enum

from notifyval import (
    ArrayMode,
    FloatCodec,
    Registry,
    Struct,
    array_field,
    scalar_field,
    struct_field,
)

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Declaring the structures")
print("-" * 100)
print()


class Colors(Enum):
    Red = 0
    Blue = 1
    White = 2
    Yellow = 3
    Black = 4


# A sub structure used inside the main one. Its fields report as s1.<field>.
class S1(Struct):
    i1 = scalar_field(int)
    d1 = scalar_field(FloatCodec("g"), 1.0)
    af1 = array_field("float32", 7)


# The structure we monitor. Fixed-width types behave like their C counterparts.
class Values(Struct):
    i1 = scalar_field("uint16")
    f1 = scalar_field("float32")
    i2 = scalar_field("int32")
    d1 = scalar_field(FloatCodec("g"))
    e2 = scalar_field(Colors, Colors.Red)
    a2 = array_field("uint32", 4, mode=ArrayMode.WHOLE_ARRAY)
    s1 = struct_field(S1)


registry = Registry()
my_values = Values(registry=registry)

# Ask all values to send their value notifications: these will be default values
registry.notify_all()

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Update some values")
print("-" * 100)
print()

# Fields are accessed as if this were a plain structure
my_values.i1 = 42
my_values.d1 = 6.555
my_values.f1 = 0.33
my_values.i2 = -56
my_values.e2 = Colors.Blue

# Whole-array arrays report every element on each change
my_values.a2[1] = 6

# Sub structures report their own paths
my_values.s1.i1 = 5
my_values.s1.d1 = 5.5
my_values.s1.af1[0] = 3.3

# Reading back does not notify
i = my_values.i1
d = my_values.s1.d1
f = my_values.s1.af1[0]

if my_values.i1 == 42:
    print("Comparison works")

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Again send all updates")
print("-" * 100)
print()

registry.notify_all()

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Update values through text")
print("-" * 100)
print()

# External updates are silent; read the value back to see them
registry.update("i1", "45")
registry.update("s1.d1", "7.25")
print(f"i1 is now {my_values.i1}, s1.d1 is now {my_values.s1.d1}")
