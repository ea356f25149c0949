# chquery

Building blocks for talking to ClickHouse from Python: SQL templating with
bound arguments, string and identifier escaping, live-view `WATCH`
statement generation, periodic ticks with a bias, and conversions between
Python values and the integer forms ClickHouse columns are stored as.

The package has no dependencies beyond the standard library.

## Installation

```
pip install chquery
```

## SQL templates

`chquery.builder.SqlBuilder` takes a template in which `?` is a bound
argument, `?fields` is the column list and `??` is a literal question mark.

```python
from chquery.builder import SqlBuilder

sql = SqlBuilder("SELECT ?fields FROM test WHERE a = ? AND b < ?")
sql.bind_arg("foo")
sql.bind_arg(42)
sql.bind_fields(["a", "b"])
print(sql.finish())
# SELECT `a`,`b` FROM test WHERE a = 'foo' AND b < 42
```

`str(sql)` shows the template with the placeholders still unbound, and
`set_output_format(name)` appends `FORMAT <name>` to the result.

The first mistake is remembered and reported by `finish()`, which raises
`InvalidParamsError`: binding more arguments than there are `?`, leaving a
`?` or `?fields` unbound, binding `?fields` with an empty column list, or
binding a value that cannot be rendered. `join_column_names` gives the
quoted, comma-joined column list on its own.

Identifiers such as table names are bound with `Identifier`:

```python
from chquery.builder import SqlBuilder
from chquery.serialize import Identifier

sql = SqlBuilder("SELECT * FROM ?")
sql.bind_arg(Identifier("my table"))
sql.finish()  # "SELECT * FROM `my table`"
```

## Rendering values

`chquery.serialize.write_arg` renders a value as an inline SQL literal:

- `None` becomes `NULL`, booleans `true` / `false`;
- integers and floats are written as numbers;
- strings, UUIDs and IP addresses are single-quoted and escaped;
- enum members are written as the quoted member name;
- lists and sets become `[...]`, tuples `(...)`;
- `Int128(x)` and `UInt128(x)` become `x::Int128` and `x::UInt128`, and
  raise `ValueError` if `x` does not fit.

Bytes, mappings, named tuples, the empty tuple and dataclass instances
raise `SerializerError`.

`write_param` renders a server-side query parameter: the same rules, except
that a top-level string is escaped but not quoted and the 128-bit wrappers
get no type suffix. `bind_value` is what `SqlBuilder.bind_arg` uses: it
quotes an `Identifier` as an identifier and renders anything else with
`write_arg`.

## Escaping

```python
from chquery.escape import escape, string, identifier

escape("a\tb")       # backslash before \ ' ` tab and newline
string("a'b")        # "'a\\'b'"
identifier("x`y")    # "`x\\`y`"
```

## Live views

`chquery.watch.Watch` builds the statements for watching a table or a query:

```python
from chquery.watch import Watch

params = Watch("SELECT ?fields FROM test ORDER BY num").limit(1).params(["num"])
print(params.create_statement())
# CREATE LIVE VIEW IF NOT EXISTS lv_<sha1 of the query> AS SELECT `num` FROM test ORDER BY num
print(params.watch_statement())
# WATCH lv_<sha1 of the query> LIMIT 1 FORMAT JSONEachRowWithProgress
```

A single word is taken as a table or view name and watched directly
(`create_statement()` then returns `None`); any other query is wrapped in a
live view named by `make_live_view_name`. `refresh(interval)` adds
`REFRESH <seconds>` to the view, `bind(value)` binds a `?`, and
`only_events()` returns a copy that watches with `EVENTS`. For row watches
`params()` needs at least one column name and raises `ValueError`
otherwise. `WATCH_OPTIONS` holds the client settings a watch is meant to
be run with.

## Ticks

`chquery.ticks.Ticks` schedules deadlines on a grid of periods counted from
its creation. `set_period` takes a `timedelta` or seconds; `None`, zero, or a
year and longer disable it. `set_period_bias(b)` shifts each deadline by up
to `period * b` either way, derived from the elapsed time, with `b` clamped
to `[0, 1]`. After `reschedule()`, `time_left()` gives the seconds left and
`reached()` tells whether the deadline has passed. The constructor takes a
clock returning nanoseconds, so time can be controlled in tests.

## Conversions

`chquery.conversions` converts IPv4 addresses, UUIDs (as a 64-bit pair or as
text), datetimes (`DateTime`, and `DateTime64` with a `Precision`) and dates
(`Date`, `Date32`) to and from their column values, raising
`ConversionError` for values out of range. Wrap any converter with
`optional` to pass `None` through unchanged.

## What the package does not do

It opens no connections and sends nothing to a server: there is no client,
no query execution, no result cursor, no insert batching and no compression.
It produces SQL text, statements and column values for code that does.