# tickengine

The core of a small game engine, with no rendering attached. It has these parts:

- **Systems** (`tickengine.system.System`) are objects with a fixed lifecycle: `create`, `setup`, `update`, `teardown` and `destroy`. `debug_name()` gives the name used in logs and errors.
- **Context** (`tickengine.context`) wires systems together. `ContextBuilder` collects injected values (`inject`, `inject_mut`) and systems (`system`). A system class lists the types it needs in a `dependencies` class attribute. Each one is looked up among the entries added before it, newest first. `build()` sets up every system and returns a `Context`. A fresh builder already holds a `ControlFlow`.
- **Entities** (`tickengine.entities.Entities`) is a tree of named entities. Removal is lazy and cascades to children. After each update, `last_removed()` lists the ids that were collected.
- **Tick** (`tickengine.tick.Tick`) is a fixed-timestep clock. It tracks drift. When the simulation runs ahead of real time, it sets `ControlFlow.sleep_until`.
- **Frame timers** (`tickengine.frame_timers.FrameTimers`) are named stopwatches. About once a second they write a summary to the debug log.
- **Input** (`tickengine.input.Input`) turns event objects into answers to gesture and analog queries:
  - The event objects are `NewEvents`, `AboutToWait`, `CloseRequested`, `KeyboardInput`, `MouseMotion` and `ButtonInput`.
  - The gestures are `KeyHold`, `KeyTrigger`, `ButtonHold`, `ButtonTrigger`, `AnyOf`, `AllOf`, `QuitTrigger` and `NoGesture`.
  - The analog controls are `MouseAnalog`, `GesturesAnalog`, `SumAnalog` and `NoAnalog2d`.
- **Projections** (`tickengine.projections.Projections`) attaches perspective projections to entities and caches their matrices. `perspective()` builds a matrix on its own.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Entities

```python
from tickengine.entities import Entities

entities = Entities.create()
root = entities.add_root("world")
child = entities.add(root, "player")

entities.remove(root)
entities.update()

assert child not in entities
assert set(entities.last_removed()) == {root, child}
```

Adding a child to a parent that does not exist raises `tickengine.errors.NoSuchEntityError`. `debug_tree_dump(indent)` renders the tree as indented text.

## Building a context

```python
from tickengine.context import ContextBuilder
from tickengine.entities import Entities
from tickengine.tick import Tick, TickConfig

context = (
    ContextBuilder()
    .inject(TickConfig(timestep=1 / 60))
    .system(Entities)
    .system(Tick)
    .build()
)

context.step()
tick = context.get(Tick)
print(tick.index())
context.destroy()
```

Systems are set up and updated oldest first. They are torn down and destroyed newest first. `Context` can also be used as a context manager, which calls `destroy()` on exit. `destroy()` is safe to call more than once.

`Context.run()` repeats these steps until a system sets `ControlFlow.quit_requested`:

1. Call `step()`.
2. Sleep until any requested `sleep_until`.

Once quit is requested, `run()` destroys the context.

Errors are wrapped as follows:

- A system that fails while it is being created raises `SystemFailure` from `ContextBuilder.system`.
- A system that fails during setup, update, teardown or destruction also raises `SystemFailure`. That error is then wrapped in `ContextError`.

In every case the original error stays reachable through `__cause__`.

## Input

```python
from tickengine.input import (
    AnyOf, ElementState, Input, KeyboardInput, KeyHold, QuitTrigger,
)

SPACE = 57  # any scan code in 0..511

jump = KeyHold(SPACE)
quit_gesture = AnyOf([QuitTrigger()])

inp = Input.create()
inp.handle_event(KeyboardInput(SPACE, ElementState.PRESSED))
print(inp.poll_gesture(jump), inp.poll_gesture(quit_gesture))  # True False
inp.reset()  # start the next update; triggers expire, mouse motion is cleared
```

## What it does not do

This package has no window, no renderer and no platform event loop.

- `Input` only sees the events you pass to `handle_event`.
- `set_cursor_grabbed` only records the requested state. `update()` then reports it through `cursor_grabbed()`; no real cursor is grabbed.
- `Context.run()` is a plain stepping loop, not a windowing event loop.