# nugem

The core of a small 2D fighting-game engine. It has no windowing or GPU code
of its own. It models the parts a fighting game is built from: input, sprite
atlases, characters, scenes and the main loop. You plug in your own event
source, renderer and file readers through small interfaces.

## Modules

### `nugem.input`

This module turns raw device events into fighting-game input states. The
layout has the buttons `a`, `b`, `c`, `x`, `y`, `z`, `start` and `back`, plus
a stick direction `d`. The direction uses the numeric-keypad map:

```
7 8 9
4 5 6
1 2 3
```

- `ButtonState` is `UNDEFINED`, `RELEASED` or `PRESSED`.
- `Direction` is `UNDEFINED` or one of `SW`, `S`, `SE`, `W`, `NEUTRAL`, `E`,
  `NW`, `N` and `NE`, valued 0 to 9.
- `InputState` is a dataclass holding one snapshot. `is_defined()` is true
  when at least one field is not `UNDEFINED`.
- The event types are the frozen dataclasses `KeyEvent`,
  `ControllerAxisEvent`, `ControllerButtonEvent`, `DeviceEvent` and
  `JoystickEvent`.
- `InputDevice` is the base class for devices. `receive_event(event)` turns
  an event into a partial state. If that state is defined and differs from the
  previous change, the device forwards it to its manager and merges it into
  its current state. The `state` property returns a copy of the current state.
- `KeyboardInput` uses a fixed layout:

  | Input | Key |
  | --- | --- |
  | `a` | `"a"` |
  | `b` | `"s"` |
  | `c` | `"d"` |
  | `x` | `"q"` |
  | `y` | `"w"` |
  | `z` | `"e"` |
  | `start` | `"return"` |
  | `back` | `"escape"` |
  | direction | `"up"`, `"down"`, `"left"`, `"right"` |

  By default it tracks held keys from the events it receives. You can also
  pass a `key_state` callable that returns the keys currently held.
- `GameController` reads `ControllerButtonEvent`s and `ControllerAxisEvent`s
  for its `jid`. The left stick (`"leftx"` and `"lefty"`) gives the direction.
  The right trigger (`"triggerright"`) sets `z` when an axis event arrives.
  `update_global_state()` sets `c` from the trigger and `z` from the
  `"rightshoulder"` button.
- `Joystick` accepts events but does not yet produce any input.
- `direction_from_axes(hor, vert)` maps stick axis values to a `Direction`.
  The dead zone is `32767 // 3`, and a negative `vert` means up.
- `InputManager` owns the devices.
  - `initialize(devices)` installs and initializes the devices and returns how
    many there are.
  - `process_event(event)` passes every event except a `DeviceEvent` to each
    device.
  - `add_receiver` and `remove_receiver` manage the `InputReceiver` objects
    that are told about every change.

### `nugem.graphics`

- `Graphics` collects `DisplayItem`s with `pass_item(tid, positions,
  tex_coords)`. `display()` hands each item that has positions to a
  `RenderBackend`, empties the queue and presents the frame.
  - `clear()` fills the frame with a dark grey.
  - `projection` is an orthographic matrix with the origin at the top left.
    The default view is 1920×1080.
- `RenderBackend` is the abstract class you implement. It has three methods:
  `clear(color)`, `draw(item)` and `present()`.
- `Texture` and `TextureRegistry` share texture ids by reference counting.
  - The registry's `on_delete` callback runs when the last handle to a texture
    is released.
  - `Texture.copy()` makes another handle to the same texture. A `Texture` can
    be used as a context manager.
- `Scene` is the abstract base for anything the game shows. Its methods are
  `update()`, `render(graphics)` and `loading()`.

### `nugem.sprites`

- `SpriteCollectionBuilder.add_sprite(image)` pastes a Pillow image to the
  right of an RGBA atlas and returns the sprite's index.
  - `build()` calls the `upload` callable once with the atlas to get a texture
    id, then returns the same `SpriteCollection` on every later call.
  - Calling `build()` with no sprites raises `ValueError`.
- `SpriteCollection` holds the texture id and one `SpriteSlot` per sprite.
  `width()` is the atlas width and `height()` is the height of the tallest
  sprite.
- `SpriteDisplayer.add_sprite(sprite_number, dest, src)` queues two triangles
  that draw a sprite into the `dest` `Rect`.
  - `src` is optional and crops the sprite.
  - An unknown sprite number raises `IndexError`.
  - A destination without positive width and height is skipped.
  - `display(graphics)` passes the queued triangles to `Graphics` and starts
    over.

### `nugem.character`

`Character(charid, loaders, base_dir="chars")` reads
`<base_dir>/<charid>/<charid>.def` through the `definition` loader in a
`CharacterLoaders`. It then loads the files that definition names: the sprite
file, the optional palette `pal1`, `cmd` and `anim`. Each goes through the
matching loader. A missing `[info] mugenversion` or `[files] sprite`, `cmd` or
`anim` entry raises `CharacterLoadError`. `copy()` loads the character afresh.

`FightCharacter` binds a `Character` to an `InputDevice`.

### `nugem.game`

- `Window` holds a queue of pending events. A `QuitEvent` marks the window for
  closing.
- `EventHandler` passes each pending event to the input manager and then to
  the window.
- `Game(window, graphics, ...)` runs the main loop at 60 frames per second by
  default. Each frame it handles events, clears, updates and renders the
  current scene, and displays.
  - `run(max_frames=None)` returns the number of frames run.
  - The loop stops after `request_quit()` or a `QuitEvent`.
  - `change_scene(scene)` first shows a loader scene. On the next frame the
    loader calls the new scene's `loading()`, and once that returns true the
    new scene becomes current.
- `Stage` is a named stage record.

### `nugem.fight`

`Fight(game, character, stage, menu)` is a scene.
- It registers itself as an input receiver.
- It puts the character in its first slot, controlled by device 0.
- `loading()` calls `stage.initialize()`, and `render()` calls
  `stage.render_background(graphics)`.
- Pressing `back` on any device calls `game.change_scene(menu(game))`.
- `close()`, or leaving a `with` block, unregisters it.

## Example

```python
from nugem.game import Game, QuitEvent, Window
from nugem.graphics import Graphics, RenderBackend, Scene
from nugem.input import KeyEvent


class PrintBackend(RenderBackend):
    def clear(self, color):
        pass

    def draw(self, item):
        print("draw", item.tid, len(item.positions))

    def present(self):
        pass


class TitleScreen(Scene):
    def loading(self):
        return True

    def update(self):
        pass

    def render(self, graphics):
        graphics.pass_item(1, [(0, 0), (10, 0), (0, 10)], [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])
        return True


window = Window([KeyEvent("escape", True), QuitEvent()])
game = Game(window, Graphics(PrintBackend()), initial_scene=TitleScreen)
game.run(max_frames=3)
```

## Receiving input

```python
from nugem.input import ButtonState, InputReceiver


class PauseOnBack(InputReceiver):
    def __init__(self):
        self.paused = False

    def receive_input(self, device, state):
        if state.back == ButtonState.PRESSED:
            self.paused = not self.paused
```

## What this package does not do

The package does not do the following:
- It does not open a window, read a real keyboard or controller, or draw to
  the screen. Events come from whatever you put in a `Window`'s queue, and
  drawing goes to your `RenderBackend`.
- It does not read character definition, command, animation, sprite or
  palette files. `Character` gets them through the loaders you supply.
- It has no menu scene and no stage with a background of its own. `Fight`
  needs both to be given to it.
- It has no command to start a game.

## Requirements

- Python 3.10 or later
- Pillow, used for sprite atlases