# memscan

memscan finds values in the memory of running Linux processes. You choose one
or more processes and which part of their memory to look at, search for a
number, and narrow the hits down with further searches as the value changes.

It reads process memory through `/proc/<pid>/maps` and `/proc/<pid>/mem`, so
it runs on Linux only. Reading another user's processes, and usually any
process you did not start yourself, needs root or the `CAP_SYS_PTRACE`
capability.

## Installing

```
pip install .
```

Two commands are installed: `memscan` and `random-memory`.

## The scanner

List the running processes (PID, UID and command name):

```
memscan --list
```

Search one or more processes for a value:

```
memscan 1234 -t u32 -v 100
```

Give `-v` more than once to narrow the results: the first value is searched
for in every loaded region, and each further value keeps only the addresses
from the previous round that now hold it.

```
memscan 1234 5678 -t u32 -s heap -v 100 -v 95 -v 90
```

The command prints the number of regions loaded, the number of hits, and up to
`--limit` addresses per process (10 by default), followed by `... and more`
when some were left out.

Options:

- `-t`, `--type`: `u8`, `u16`, `u32`, `u64`, `f32` or `f64` (default `u64`).
- `-s`, `--scope`: `stack`, `heap`, `both` or `all` (default `both`). `all`
  takes every readable mapping.
- `-v`, `--value`: a value to search for; may be repeated.
- `--settings PATH`: a JSON settings file to take defaults from.
- `--limit N`: addresses shown per process.
- `--list`: list running processes and exit.
- `--escalate`: when not running as root, run the command again through
  `pkexec`; when only the effective user is root, switch the real user to root.

At least one PID is required unless `--list` is given. Failures to read a
process are reported as `Error: ...` with exit status 1; regions that cannot
be read during a search are logged and skipped.

### Settings file

`--settings` reads a JSON object with any of these keys; missing keys, and a
file that cannot be read or parsed, fall back to the defaults:

```json
{
  "default_search_scope": "Both",
  "default_data_type": "U64",
  "default_endianness": "Native",
  "search_buffer_size": 134217728
}
```

Scopes are `Stack`, `Heap`, `Both` and `All`; data types `U8`, `U16`, `U32`,
`U64`, `F32` and `F64`; byte orders `Little`, `Big` and `Native`.
`search_buffer_size` is the number of bytes read at a time during the first
search (128 MiB by default). `-t` and `-s` override the file.

## A target to practise on

```
random-memory 1G 8
```

starts threads that each allocate the given amount of memory, fill it with the
same seeded pseudo-random data, print a checksum of it, and then wait until
interrupted with Ctrl-C. Both arguments are optional: the size defaults to
`1G` and the thread count to `8`. The last character of the size is always
read as the unit: `K`, `M` or `G`, and any other character means plain bytes
(for example `4096B`).

## Using it as a library

Searching a buffer for fixed-width values, read in native byte order from
offset zero:

```python
from memscan.finders import ElementType, find_next, find_inclusive_range

haystack = bytes(range(100))
find_next(ElementType.U8, 50, haystack)                  # 50
find_inclusive_range(ElementType.U8, 10, 20, haystack)   # 10
```

`find_exclusive_range` does the same with the bounds left out. Each returns
the byte offset of the first match, or `None`. A trailing partial element is
never looked at. Floating-point needles compare by value, so `NaN` is never
found.

To walk through every match, use the iterators in `memscan.search`:

```python
from memscan.search import MemorySearch

offsets = list(MemorySearch(ElementType.U8, 1, b"\x01\x00\x00\x01"))  # [0, 3]
```

`InclusiveRangeSearch` and `ExclusiveRangeSearch` work the same way with a
lower and an upper bound.

Parsing user input into a typed value:

```python
from memscan.datatypes import DataType

value = DataType.U32.parse("1337")
str(value)            # "1337"
value.data_type()     # DataType.U32
```

Bad input raises `memscan.errors.DataTypeParseError`; failures to read a
process raise `PermissionDeniedError`, `ProcessNotFoundError` or
`ErrnoError`, all subclasses of `AppError`.

The other modules:

- `memscan.scope`: `read_maps` and `MemoryMap` parse `/proc/<pid>/maps`;
  `SearchScope.is_in_scope` decides which mappings a scope covers.
- `memscan.processes`: `fetch_processes` and `ProcessPicker` list running
  processes and keep track of which are selected.
- `memscan.scanner`: `SearchRegion.load`, `read_memory`, `search_sync`,
  `search_continue_sync` and `read_value`.
- `memscan.settings`: `Settings`, with `load`, `save`, `to_dict` and
  `from_dict` for the JSON file described above.
- `memscan.app`: `Session` holds loaded regions, results and tracked
  addresses, with `load_regions`, `search`, `clear`, `result_count`,
  `toggle_tracked`, `refresh` and `edit`.
- `memscan.randmem`: `parse_size`, `fill_random` and `checksum`.

## What it does not do

- There is no graphical or interactive interface; `memscan` runs one set of
  searches per invocation and exits.
- Settings are only read, from the file given with `--settings`; the command
  never writes them back (`Settings.save` does, when called from code).
- Nothing is written into a target process. `Session.edit` only replaces the
  value the session tracks for an address.
- Tracking and refreshing addresses is available through `Session`, not from
  the command line.

## Running the tests

```
pip install ".[test]"
pytest
```