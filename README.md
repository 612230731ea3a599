# moondeck

Host-side building blocks for streaming games from a PC to a handheld client.

## Contents

- `moondeck.stream` – the stream helper command (`moondeck-stream`). It uses
  `SingleInstanceGuard` to allow only one running copy. It writes its log to
  `AppMetadata.log_path()`, which is `/tmp/moondeckstream.log` on Linux. It
  publishes a heartbeat for another process to watch, and it exits on SIGINT,
  on SIGTERM, or when the listening side calls `terminate()`.
  `install_signal_handler(quit_callback)` sets up the signal handling it uses.
- `moondeck.heartbeat.Heartbeat` – a liveness signal between two processes.
  It is kept in a small file in the temporary directory and guarded by a file
  lock. One side calls `start_beating()` and the other calls
  `start_listening()`. The listener reads `is_alive()` and receives
  `state_changed`. It can also ask the beating side to stop with
  `terminate()`, which makes the beating side emit `should_terminate`. Call
  `close()`, or use the object as a context manager, to stop it.
- `moondeck.streamstate.StreamStateHandler` – listens to a heartbeat and
  exposes `state` as a `StreamState` (`NOT_STREAMING`, `STREAMING` or
  `STREAM_ENDING`). `end_stream()` asks a running stream to end.
- `moondeck.appsettings.AppSettings` – loads a JSON settings file. The file
  holds `port` (default 59999), `logging_rules`, `handled_displays`,
  `sunshine_apps_filepath`, `prefer_hibernation`, `ssl_protocol`,
  `force_big_picture`, `close_steam_before_sleep` and `mac_address_override`.
  On Linux it also holds `registry_file_override` and `steam_binary_override`.
  If the file is missing, empty or incomplete, a complete file is written and
  read back. Unreadable files and out-of-range ports raise `SettingsError`.
- `moondeck.clientids.ClientIds` – a set of paired client ids stored as a JSON
  array. It provides `load()`, `save()`, `add()`, `remove()` and `in`.
  Failures raise `ClientIdsError`.
- `moondeck.pairingmanager.PairingManager` – runs one pairing at a time. The
  expected `hashed_id` is the base64 encoding of the client id followed by the
  PIN. `finish_pairing(pin)` records the client when the PIN matches. The
  signals `user_input_requested` and `pairing_aborted` tell a front end when
  to show or close a PIN prompt.
- `moondeck.httpserver.HttpServer` – a threaded HTTPS server with the
  following methods:
  - `route(path_pattern, method, handler)` registers a handler. Each `<arg>`
    in the pattern matches one path segment.
  - `after_request(handler)` registers a handler that runs after each request.
  - `is_authorized(headers)` checks the client id in a Basic authorization
    header against `ClientIds`.
  - `start_server(...)` and `stop()` start and stop the server.
  `get_authorization_id(headers)` extracts that client id.
- `moondeck.sunshineapps.SunshineApps` – reads the app names from a Sunshine
  `apps.json`. With no path given it uses `default_apps_path()`.
- `moondeck.appmetadata.AppMetadata` – gives the application names and the
  paths for logs, settings and autostart entries. `config_dir()` returns
  `XDG_CONFIG_HOME` or `~/.config`.
- `moondeck.logsettings` – provides `get_logger(category)`, the process-wide
  `get_log_settings()`, and `set_logging_rules()`. The rules take the form
  `buddy.server.debug=true`, separated by `;` or newlines.
- `moondeck.enums` – `PcState`, `StreamState`, and `SslProtocol` with
  `from_name()`.
- `moondeck.jsonvalues` – typed and validated extraction of fields from
  decoded JSON objects.
- `moondeck.events.Signal` – a small observer used for the notifications
  above.

## Installation

```
pip install .
```

## Running the stream helper

```
moondeck-stream
```

Use `moondeck-stream --version` to print the version. If another instance is
already running, the command exits with status 1.

## Library example

```python
from moondeck.appmetadata import App, AppMetadata
from moondeck.appsettings import AppSettings
from moondeck.clientids import ClientIds
from moondeck.pairingmanager import PairingManager

meta = AppMetadata(App.BUDDY)
settings = AppSettings(meta.settings_path())

ids = ClientIds("/tmp/moondeck/clients.json")
ids.load()
pairing = PairingManager(ids)
```

## What the package does not do

- There is no main host service and no command for one.
- It does not launch or close Steam, shut down, restart or suspend the PC,
  change display resolutions, or manage autostart entries. `AppMetadata` only
  reports the autostart paths.
- `HttpServer` comes with no API routes. The caller registers them.
- It has no system tray icon and no PIN input dialog.
- The stream helper does not keep the PC from going to sleep.

## Running the tests

```
pip install .[test]
pytest
```