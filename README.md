# lexgraph

`lexgraph` holds the pieces a lexer generator uses to build and reason about
its state graph. Each node in the graph is one of three kinds:

- a **fork** (`Fork`), which branches on the next input byte,
- a **rope** (`Rope`), which matches a fixed sequence of byte ranges,
- a **leaf** (`LeafNode`), a terminal state wrapping a token definition.

The package uses only the standard library.

## Installation

```
pip install lexgraph
```

To run the tests:

```
pip install "lexgraph[test]"
pytest
```

## Modules

- `lexgraph.ranges`: `Range`, an inclusive range of byte values.
  - `Range.from_byte` and `Range.from_chars` accept ints or one-character strings.
  - Iterating over a range yields its bytes; `is_byte` and `as_byte` handle one-byte ranges.
  - Ranges order by their first byte; `str()` gives a compact form such as `[a-z]`, `a` or `[FF]`.
- `lexgraph.errors`: error types.
  - `LogosError` is an exception holding a message; `span()` ties it to a location as a `SpannedError`.
  - `Errors` collects located errors; `render()` returns them as a Rust function of
    `compile_error!` calls, or `None` when there are none.
- `lexgraph.leaf`: `Leaf`, a token definition with a priority, an optional field type and an
  optional `Callback` (a label, an `InlineCallback`, or a skip).
  - `with_priority`, `with_field` and `with_callback` return modified copies.
  - `disambiguate` compares two leaves by priority.
- `lexgraph.tables`: `TableStack` and `TableView`.
  - Each view is one bit plane of a shared 256-entry table; a new table opens every eight views.
  - `TableStack.render()` gives the table declarations as Rust `static` items.
- `lexgraph.fork`: `Fork`, a byte-indexed branch table with an optional miss target.
  - `branch` adds a non-overlapping branch; `add_branch` and `merge` combine conflicting
    targets through a graph.
  - `branches()` yields `(Range, node_id)` runs in byte order; `contains` tells whether a whole
    range leads to one node.
- `lexgraph.rope`: `Rope`, `Pattern` and `Miss`.
  - `Miss` says where a rope goes on failure: nowhere, only on the first byte, or on any byte.
  - `Rope.into_fork`, `prefix`, `split_at` and `remainder` reshape ropes while building a graph.
- `lexgraph.graph`: `Graph`, the node store, with ids starting at 1.
  - `push` reuses an identical fork or rope already pushed.
  - `reserve` and `insert` build loops; `ReservedId.id` is the reserved slot.
  - `merge(a, b)` gives a node accepting what either accepts. Two leaves of equal priority are
    recorded as a `DisambiguationError` in `errors()` rather than raised.
  - `shake(root)` drops unreachable nodes; `node_miss` and `unwrap_leaf` inspect nodes.
- `lexgraph.meta`: `Meta.analyze(root, graph)` gives a `MetaItem` for every reachable node:
  its reference count, the minimum number of bytes to read from it, whether it leads into a
  loop, and which nodes enter it as a loop.

## Example

```python
from lexgraph.fork import Fork
from lexgraph.graph import Graph, LeafNode
from lexgraph.meta import Meta
from lexgraph.ranges import Range

graph = Graph()
ident = graph.push(LeafNode("IDENT"))

reserved = graph.reserve()
loop = Fork().branch(Range.from_chars("a", "z"), reserved.id).with_miss(ident)
root = graph.insert(reserved, loop)

for rng, target in graph[root].branches():
    print(rng, "=>", target)   # [a-z] => 2 (the fork loops to itself)

meta = Meta.analyze(root, graph)
print(meta[root].loop_entry_from)   # [2]
```

## What it does not do

`lexgraph` has no command-line tool and does not read token definitions or regular
expressions. It builds and analyses the state graph only; turning a graph into lexer source
code is left to the caller.