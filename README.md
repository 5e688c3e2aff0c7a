# exprvm

`exprvm` executes bytecode on a small stack machine. It is meant as the
evaluation core of a rule engine or decision table: the values it works on
are the ones JSON can hold (null, booleans, numbers, strings, arrays and
objects), numbers are exact decimals, and every operation either gives a
value or raises a `VMError` that says which operation failed and why.

The package has no dependencies outside the standard library.

## What is inside

| Module                | What it offers |
|-----------------------|----------------|
| `exprvm.errors`       | `VMError` and its kinds: `OpcodeError`, `OpcodeOutOfBounds`, `StackOutOfBounds`, `ParseDateTimeError`, `NumberConversionError` |
| `exprvm.variable`     | `from_json`, `to_json`, `type_name`, `to_datetime` and the `Interval` value |
| `exprvm.dates`        | `parse_date_time`, `parse_time`, `start_of`, `end_of` and `DateUnit` |
| `exprvm.opcodes`      | `Op`, `Instruction`, `TypeCheckKind`, `TypeConversionKind`: the bytecode |
| `exprvm.arithmetic`   | comparison, arithmetic, rounding, `random_up_to`, `make_interval` and `contained_in` |
| `exprvm.aggregates`   | `average`, `median`, `mode`, `minimum`, `maximum`, `total` |
| `exprvm.sequences`    | `fetch`, `slice_of`, `length`, `flatten`, `contains` |
| `exprvm.text`         | `uppercase`, `lowercase`, `starts_with`, `ends_with`, `matches`, `extract`, `type_check`, `convert` |
| `exprvm.temporal`     | `date_part`, `date_boundary`, `parse_date_time_value`, `parse_time_value`, `parse_duration`, `duration_seconds` |
| `exprvm.machine`      | `VM` and its `Scope`; `VM.run(bytecode, env)` executes a sequence of instructions |
| `exprvm.display`      | `pretty_print`, a coloured one-line rendering of a value |

## Values

Machine values are `None`, `bool`, `Decimal`, `str`, `list` and `dict`.
Convert decoded JSON into machine values with `from_json` and back with
`to_json`. Numbers become exact decimals, so arithmetic does not drift:

```python
from exprvm.variable import from_json, to_json
from exprvm.arithmetic import add, less

total = add(from_json(0.1), from_json(0.2))
to_json(total)                              # 0.3
less(total, from_json(1))                   # True
```

`to_json` gives integral numbers back as `int` and the rest as `float`.

Operations that receive values of the wrong kind raise rather than guess.
An `OpcodeError` carries the name of the operation and a message:

```python
from exprvm.errors import OpcodeError

try:
    add(from_json("a"), from_json(1))
except OpcodeError as error:
    print(error.opcode, error.message)      # Add Unsupported type
```

## Aggregates and sequences

```python
from exprvm.aggregates import median, mode
from exprvm.sequences import flatten

to_json(median(from_json([1, 2, 3, 4])))        # 2.5
to_json(mode(from_json([1, 1, 2, 2, 2, 5])))    # 2
to_json(flatten(from_json([1, [2, 3], 4])))     # [1, 2, 3, 4]
```

## Dates and times

Dates are accepted as `YYYY-MM-DD`, `YYYY-MM-DD HH:MM:SS`, RFC 3339
timestamps (converted to UTC), or the word `now`. Units for `start_of` and
`end_of` may be written short or long (`"d"`, `"day"`, `"days"`; `"M"` for
months):

```python
from exprvm.dates import DateUnit, parse_date_time, start_of, end_of

moment = parse_date_time("2022-11-16 13:45:10")
start_of(moment, DateUnit.from_name("week"))   # Monday 2022-11-14 00:00:00
end_of(moment, DateUnit.from_name("M"))        # 2022-11-30 23:59:59
```

`exprvm.temporal.parse_duration` reads durations such as `"1h"`, `"60m"`
or `"1d"` and returns whole seconds.

## Running bytecode

A program is a sequence of `exprvm.opcodes.Instruction` values, each an
`Op` with an argument where the operation takes one. `Instruction` raises
`ValueError` for a missing or wrong argument. `VM().run` executes the
program against an environment object (or `None`) and returns the value
left on top of the stack:

```python
from exprvm.machine import VM
from exprvm.opcodes import Instruction, Op
from exprvm.variable import from_json, to_json

program = [
    Instruction(Op.FETCH_ENV, "a"),
    Instruction(Op.FETCH_ENV, "b"),
    Instruction(Op.ADD),
]
to_json(VM().run(program, from_json({"a": 3, "b": 6})))   # 9
```

Errors during execution are raised as `VMError` subclasses.

## Showing results

`exprvm.display.pretty_print` renders a value on one line with ANSI
colours: numbers and booleans in yellow, strings quoted and in green,
`null` in bold, arrays in brackets and objects in braces.

## What the package does not do

There is no lexer, parser or compiler: the package does not read
expression text, so programs have to be built as lists of `Instruction`
values. There is no interactive prompt or command-line entry point either.

## Tests

The tests use pytest and hypothesis; install the `test` extra to get them.