# strikepad

strikepad is a desktop trainer for a strike pad that has seven lamp zones. The
pad's receiver is reached over plain HTTP with JSON bodies. By default the
program talks to `192.168.4.1` on port 80.

## Running

```
pip install .
strikepad [--host HOST] [--port PORT] [--timeout SECONDS]
```

The window is built with tkinter, which ships with most Python installations.
No other packages are needed.

On start, a login dialog asks for a user name and sends it to the receiver's
`/login` endpoint. If you close the dialog without entering a name, no login is
sent and the session uses an empty name.

The main window has seven zone buttons and four controls:

- **Создать тренировку** starts recording a new sequence. Each zone button you
  press then adds that zone to the sequence. Press the control again to stop
  recording.
- **Начать тренировку** sends the recorded sequence to `/sequence`. The
  sequence is sent as a string of zone digits. If nothing has been recorded,
  nothing is sent.
- **Быстрая тренировка** reads your records from `/readfile` and takes your
  type from the last record that has one. The types are "нокаутер" (10
  strikes), "игровик" (15) and "темповик" (20). If no known type is found, you
  get "игровик". If the records cannot be read at all, you get "темповик". A
  weighted random sequence for that type is then generated and sent.
- **Статистика** shows your records from `/readfile` in a window with two bar
  charts: average force and average reaction time per zone. Below the charts is
  a note that flags each zone where your latest session was more than 10%
  weaker or slower than the average of your earlier sessions. If you have fewer
  than two sessions, the note says there is not enough data.

Once a sequence has been sent, `/result` is polled every second. Each zone's
force and time appear on its button, and the button is highlighted briefly.

## Using the library

```python
import random

from strikepad.client import EspClient
from strikepad.session import TrainingSession

client = EspClient("192.168.4.1", 80, 5.0)
session = TrainingSession(client, "alice", random.Random())
session.fast_training()      # returns the detected UserType
print(session.poll())        # {zone: (impact, time)}
```

Other methods of `TrainingSession`:

- `toggle_recording`, `press_lamp` and `start_training` record a sequence and
  send it.
- `random_training` sends ten uniformly random zones.
- `load_statistics` returns the user's records.

Errors from the receiver are raised as `strikepad.client.EspError`. Actions
that cannot be carried out raise `strikepad.session.SessionError`.

These helpers need no network:

- `strikepad.training`: `UserType`, `series_length`, `zone_weights`,
  `generate_training_sequence`, `random_sequence`, `sequence_to_string`,
  `detect_user_type`
- `strikepad.analysis`: `analyze_training`, `build_analysis_message`,
  `zone_averages`, `filter_user_trainings`, `describe_user_type`
- `strikepad.charts`: `Rect`, `Bar`, `layout_bar_chart`, `split_chart_area`,
  `draw_charts` (draws onto any object with `fill`, `text`, `line` and
  `rectangle` methods)
- `strikepad.client`: `parse_latest_zones`, `parse_trainings`,
  `parse_statistic_dump`, `format_zone_result`

## What it does not do

- No training history is stored locally. All records live on the receiver and
  are read from it.
- The window offers no control for `random_training`. It is available only
  through the library.

## Tests

```
pip install .[test]
pytest
```