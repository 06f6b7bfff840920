# vectorpad

A small library for keeping a stash of short ideas and making sense of it,
plus a few building blocks for drawing it in a terminal. It has no
dependencies beyond the standard library.

## What is in it

- `vectorpad.stash.model` – the data model: `Item`, `Stack` and `StashFile`
  (each with `to_dict()` / `from_dict()` for the JSON shape), the enums
  `Uniqueness`, `Source`, `ItemType` and `AgeTier`, and
  `compute_age_tier(created, now)` (fresh under 24 h, recent under 7 days,
  aging under 30 days, stale after that).
- `vectorpad.stash.cluster` – `tokenize`, `jaccard_similarity`,
  `flatten_items`, `cluster_items(items, now)` and `cluster(stacks, now)`.
  Two items share a stack when the Jaccard similarity of their word tokens
  (stop words removed) is greater than 0.40. Each clustered stack gets a
  label from its most shared tokens and a slug id. Every clustered item is
  scored `high`, `medium` or `low` for uniqueness. Items that match nothing
  end up in a trailing stack with id `unclustered`.
- `vectorpad.stash.similarity` – `cosine_similarity(a, b)`,
  `classify_similarity(score)`, which returns a `SimilarityLevel` (near
  duplicate at 0.90 or above, same idea at 0.80, related at 0.65, else
  different), `threshold_related()` and the `SimilarResult` record.
- `vectorpad.stash.db` – `StashDB`, a SQLite store and context manager. It
  offers `insert`, `get` (raises `ItemNotFoundError`), `all`, `filter`,
  `by_claim_id`, `delete`, `update_embedding`, `find_similar`, `count`,
  `count_with_embeddings`, `items_without_embeddings` and
  `cache_similarity`. Embeddings are stored as little-endian float32 blobs
  (`encode_embedding` / `decode_embedding`).
- `vectorpad.stash.diff` – `diff_verdicts(a, b)` compares the JSON bodies of
  two verdict items field by field and returns a `VerdictDiff`, whose
  `render()` gives readable text. `extract_verdict_json(text)` pulls the JSON
  out of a `verdict: <title>\n\n<json>` text. Both raise `ValueError` for
  non-verdicts or bad JSON.
- `vectorpad.tui.styles` – `Style` (ANSI colours, bold, padding, width and a
  rounded border), the shared `STYLE_*` styles and `severity_color`.
- `vectorpad.tui.help` – `HelpModel`, `HelpEntry`, `app_help()` and
  `render_centered_overlay(content, width, height)`.
- `vectorpad.tui.scope_overlay` – `TextArea`, a minimal text area that takes
  key names such as `"enter"` and `"backspace"`, or pasted text, and
  `ScopeOverlay`, which is built on it.
- `vectorpad.tui.stash_panel` – `StashPanel`, a scrollable list of stacks,
  and the helpers `format_stack_line`, `uniqueness_symbols`, `stack_age`,
  `age_tier_from_duration` and `age_to_style`.

## Usage

### Clustering

```python
from datetime import datetime, timedelta, timezone

from vectorpad.stash.cluster import cluster_items
from vectorpad.stash.model import Item, Source

now = datetime(2026, 3, 7, 12, tzinfo=timezone.utc)
items = [
    Item(id="item-1", text="token economics cache amplification metric",
         created=now - timedelta(hours=2), source=Source.CLI),
    Item(id="item-2", text="cache amplification for token spend economics",
         created=now - timedelta(hours=1), source=Source.CLI),
    Item(id="item-3", text="terminal shortcuts for stash navigation",
         created=now, source=Source.CLI),
]
for stack in cluster_items(items, now):
    print(stack.id, stack.label, [item.uniqueness.value for item in stack.items])
```

### Storing and searching

```python
from vectorpad.stash.db import StashDB
from vectorpad.stash.model import Item, Source

with StashDB("/tmp/stash.db") as db:
    db.insert(Item(id="a", text="alpha", source=Source.CLI, embedding=[1.0, 0.0, 0.0]))
    db.insert(Item(id="b", text="beta", source=Source.CLI, embedding=[0.9, 0.1, 0.0]))
    for result in db.find_similar([1.0, 0.0, 0.0], 0.5, 10):
        print(result.item.id, round(result.score, 3), result.level.value)
```

### Saving a stash as JSON

```python
import json

from vectorpad.stash.model import CURRENT_VERSION, StashFile

stash_file = StashFile(stacks=cluster_items(items, now), version=CURRENT_VERSION)
text = json.dumps(stash_file.to_dict(), indent=2)
restored = StashFile.from_dict(json.loads(text))
```

### Drawing the stash panel

```python
from vectorpad.tui.stash_panel import StashPanel

panel = StashPanel(width=40, height=20)
panel.load_stacks(cluster_items(items, now))
print(panel.view(focused=True))
```

## What it does not do

- There is no command-line program and no interactive terminal application.
  The `tui` modules render strings and keep state, but nothing reads the
  keyboard or runs a screen loop.
- There is no higher-level stash store: nothing picks a default location,
  writes JSON files atomically with backups, migrates older files, or
  imports a JSON stash into `StashDB`. `StashDB` and the `to_dict` /
  `from_dict` methods are the storage there is.
- Embeddings are not computed. `StashDB` stores and compares vectors you
  supply, but there is no client for an embedding server.
- There is no summarising of a stack into one line, no clipboard access, no
  launch targets and no key-binding table.
- The `vectorpad.vector` sub-package is empty; it does not render
  classified sentences.