# workbench

The package holds three sets of console tools:

- **workbench.mail** sends mail over SMTP. It handles plain-text messages,
  messages with attachments and templated bulk mail. It keeps an
  `email.log` and can print sending statistics and keyword searches over
  that log. It also has a one-shot system resource check that mails an
  alert.
- **workbench.vdisk** is a virtual disk kept in a directory. It enforces a
  byte quota and supports create, copy, move, grep and Base64 "encryption".
- **workbench.corelog** holds the parts of a logger:
  - log levels and log entries,
  - shared settings,
  - a file writer that rolls `application.log` over at 10 KB and removes
    old rolled files,
  - a stopwatch and a scoped timer,
  - a hook that reports unhandled exceptions.

## Installation

```
pip install .
```

To run the test suite, install the `test` extra:

```
pip install ".[test]"
pytest
```

## Mail

### Configuration

The mail tools read `email.conf` from the working directory. It holds one
`key=value` pair per line. Blank lines and lines starting with `#` are
ignored, and so are unknown keys.

```
server_ip=127.0.0.1
port=2525
from_address=sender@example.com
use_auth=0
io_timeout_ms=5000
max_retry=1
```

The keys are:

- `server_ip` and `from_address` are required.
- `port` defaults to 25.
- `use_auth` turns on `AUTH LOGIN` when it is `1`, `true` or `yes`. In that
  case `username` and `password` must also be set.
- `io_timeout_ms` sets the socket timeout. A value of 0 or less leaves the
  socket without a timeout.
- `max_retry` is the number of send attempts. It is always at least 1.

A missing file, a missing required key or a bad number raises
`workbench.mail.config.ConfigError`.

### Interactive menu

```
workbench-mail
```

The menu offers these actions:

- send a single message
- send bulk mail from `recipients.txt` and `mail_template.txt`
- show statistics from `email.log`
- send a message with one attachment
- search `email.log` by keyword, with an optional time range
- run the system resource check

Sends and failures are recorded in `email.log`. The resource check uses
these thresholds:

- disk: 20 GB free
- memory: 90 %
- CPU: 80 %

It mails its report only when something is over a threshold.

`recipients.txt` holds one `email,name` pair per line:

```
alice@example.com,Alice
bob@example.com,Bob
```

The template may use `${name}`, `${index}` (the message number) and
`${time}` (the current time). A placeholder with no matching value is left
as written.

### Line protocol

```
workbench-mail-stdio
```

The command creates a temporary directory and writes default
`email.conf`, `recipients.txt` and `mail_template.txt` files into it. It
works inside that directory; the default server is `127.0.0.1:2525`. It
prints `EMAIL_MODULE_STDIO_READY` and then reads one command per line.
Fields are separated by `|`:

```
SEND_SIMPLE|bob@example.com|Hello|Body text
BULK_SEND
SHOW_STATS
SEARCH_LOG|keyword|2025-01-01|2025-12-31
CHECK_MAIL
QUIT
```

Each reply starts with `OK|` or `ERR|`. `CHECK_MAIL` asks the POP3 server
on port 110 of the configured host for its message count.

### From Python

```python
from workbench.mail.template import render_template
from workbench.mail.config import load_smtp_config
from workbench.mail.message import SimpleEmail, build_message
from workbench.mail.smtp import SmtpClient, SmtpError

print(render_template("Dear ${name}, message ${index}", {"name": "Alice", "index": "1"}))

cfg = load_smtp_config("email.conf")
mail = SimpleEmail(to="bob@example.com", subject="Hello", body="Hi Bob")
try:
    SmtpClient().send_mail(cfg, build_message(cfg, mail))
except SmtpError as exc:
    print("send failed:", exc)
```

Other useful functions:

- `workbench.mail.attachment.attachment_from_file` reads a file into an
  `AttachmentInfo`, which you can add to `SimpleEmail.attachments`.
- `workbench.mail.logsearch.search_log` returns the matching `email.log`
  lines as `LogMatch` objects.
- `workbench.mail.stats.collect_statistics` counts single and bulk
  successes and failures, both in total and per recipient.
- `workbench.mail.api` has one-call versions of these operations that read
  `email.conf` from the working directory.

## Virtual disk

```
workbench-vdisk [--root DIR] [--quota BYTES]
```

By default the disk lives in `MyVirtualDisk` in the system temporary
directory, with a quota of 5000 bytes. The command reads these commands
from standard input:

- `create <name> <content>`
- `del <name>`
- `cp <src> <dest>`
- `mv <src> <dest>`
- `grep <keyword> <name>`
- `encrypt <name>`
- `decrypt <name>`
- `tree`
- `status`
- `exit`

Actions are appended to `system_log.txt` inside the disk directory. That
file does not count against the quota.

From Python:

```python
from workbench.vdisk import VirtualFileSystem, FileSystemError

vfs = VirtualFileSystem("disk", 5000)
vfs.create_file("notes.txt", "hello")
print(vfs.status())
```

Failed operations raise `FileSystemError`.

## Core logger parts

```python
from workbench.corelog.config import get_config
from workbench.corelog.entry import LogEntry, LogLevel
from workbench.corelog.stopwatch import Stopwatch
from workbench.corelog.writer import FileWriter

config = get_config()
with FileWriter("application.log", config.log_file_path) as writer:
    writer.write(LogEntry("service started", LogLevel.INFO, "Main"))

watch = Stopwatch()
watch.start()
...
watch.stop()
print(watch.elapsed_milliseconds)
```

Entry format and storage:

- Each entry is written as
  `YYYY-MM-DD HH:MM:SS [LEVEL]  [TID:n]  [Source] message`.
- When the file reaches 10 KB it is renamed to
  `application.YYYYMMDD_HHMMSS.log`.
- On the first write, rolled files older than `retention_days` are
  removed. The default is 7 days; 0 keeps them.

Two more helpers take objects you supply:

- `ScopedTimer` takes any object with a `log(message, source_class)`
  method. It logs how long its `with` block took.
- `workbench.corelog.stacktrace.install_exception_hook` takes any object
  with a `fatal(message, source_class)` method. It reports unhandled
  exceptions from every thread to that object.

### What is not included

There is no ready-made logger object that ties these parts together.
There is also no command or menu for the logger. `FileWriter` writes every
entry it is given. Nothing in the package checks `LogConfig.min_level`, so
any level filtering is left to the caller.