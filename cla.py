#!/usr/bin/env python3
"""
cla — Command Launcher
A terminal UI that keeps a short list of shell commands, lets you edit
them in place, and runs the one you pick.

Usage:
    cla                                    Interactive TUI
    cla list                               List stored commands
    cla run <index>                        Run a stored command directly
    cla path                               Print the data file path
    cla config                             Print the effective configuration
    cla help                               Show help

Options:
    --config <path>                        Use another config file
    --debug                                Write a debug log to ~/.cla/cla.log
"""

import json
import logging
import os
import sys
import tempfile
from dataclasses import dataclass, asdict, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.reactive import reactive
from textual.widgets import Static, OptionList
from textual.widgets.option_list import Option
from rich.color import Color, ColorParseError
from rich.style import Style
from rich.text import Text

# ── Paths ─────────────────────────────────────────────────────────────

CLA_HOME_ENV = "CLA_HOME"
CLA_CONFIG_ENV = "CLA_CONFIG"
CONFIG_NAME = "config.json"
LOG_NAME = "cla.log"

CHAR_LIMIT = 99
PLACEHOLDER = "Input any command."
FOCUSED_PROMPT = "> "
BLURRED_PROMPT = "  "

NAV_NEXT_KEYS = ("tab", "down")
NAV_PREV_KEYS = ("shift+tab", "up")

log = logging.getLogger("cla")
log.addHandler(logging.NullHandler())


def cla_home() -> Path:
    """Base directory for config, data and log files."""
    env = os.environ.get(CLA_HOME_ENV, "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".cla"


# ── Errors ────────────────────────────────────────────────────────────


class ClaError(Exception):
    """Base class for errors that end the program with a diagnostic."""


class ConfigError(ClaError):
    pass


class StorageError(ClaError):
    """Reading or writing the command file failed.

    ``kind`` is ``"io"`` for filesystem failures and ``"format"`` when the
    file exists but does not hold a valid command list.
    """

    def __init__(self, kind: str, path, message: str):
        super().__init__(f"{path}: {message}")
        self.kind = kind
        self.path = str(path)
        self.message = message


# ── Config ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Config:
    focused_text_color: str = "#ff79c6"
    unfocused_text_color: str = "#6272a4"
    data_file: str = "data.json"
    limit_line: int = 50
    exec_key: str = "enter"
    save_key: str = "ctrl+s"
    del_key: str = "ctrl+d"
    add_key: str = "ctrl+n"
    quit_key: str = "escape"
    home: str = field(default="", compare=False)

    @property
    def action_keys(self) -> Dict[str, str]:
        return {
            "exec_key": self.exec_key,
            "save_key": self.save_key,
            "del_key": self.del_key,
            "add_key": self.add_key,
            "quit_key": self.quit_key,
        }

    @property
    def data_path(self) -> Path:
        p = Path(self.data_file).expanduser()
        if p.is_absolute():
            return p
        base = Path(self.home) if self.home else cla_home()
        return base / p

    def to_dict(self) -> dict:
        d = asdict(self)
        d.pop("home")
        return d


_CONFIG_TYPES = {
    "focused_text_color": str,
    "unfocused_text_color": str,
    "data_file": str,
    "limit_line": int,
    "exec_key": str,
    "save_key": str,
    "del_key": str,
    "add_key": str,
    "quit_key": str,
}


def normalize_color(value: str) -> str:
    """Accept hex, color names and bare 256-color numbers ("205")."""
    value = value.strip()
    if value.isdigit():
        value = f"color({value})"
    try:
        Color.parse(value)
    except ColorParseError as e:
        raise ConfigError(f"invalid color {value!r}: {e}") from e
    return value


def validate_config(cfg: Config) -> None:
    if cfg.limit_line < 1:
        raise ConfigError(f"limit_line must be a positive integer, got {cfg.limit_line}")
    if not cfg.data_file.strip():
        raise ConfigError("data_file must not be empty")
    seen: Dict[str, str] = {}
    for name, key in cfg.action_keys.items():
        if not key:
            raise ConfigError(f"{name} must not be empty")
        if key in NAV_NEXT_KEYS or key in NAV_PREV_KEYS:
            raise ConfigError(f"{name} '{key}' is reserved for navigation")
        if key in seen:
            raise ConfigError(f"{name} and {seen[key]} are both bound to '{key}'")
        seen[key] = name


def config_path(path: Optional[str] = None) -> Path:
    if path:
        return Path(path).expanduser()
    env = os.environ.get(CLA_CONFIG_ENV, "").strip()
    if env:
        return Path(env).expanduser()
    return cla_home() / CONFIG_NAME


def load_config(path: Optional[str] = None) -> Config:
    """Load the JSON config, merged over defaults.

    A missing default config file is fine; an explicitly named one must exist.
    """
    p = config_path(path)
    data: dict = {}
    if p.exists():
        try:
            with open(p, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"cannot read config {p}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config {p} must be a JSON object")
    elif path:
        raise ConfigError(f"config file not found: {p}")

    values = {}
    for key, value in data.items():
        expected = _CONFIG_TYPES.get(key)
        if expected is None:
            raise ConfigError(f"unknown config key '{key}' in {p}")
        # bool is an int subclass
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(f"config key '{key}' must be {expected.__name__}")
        values[key] = value

    for key in ("focused_text_color", "unfocused_text_color"):
        if key in values:
            values[key] = normalize_color(values[key])

    cfg = Config(home=str(cla_home()), **values)
    validate_config(cfg)
    log.debug("config loaded from %s: %s", p, cfg.to_dict())
    return cfg


# ── Data ──────────────────────────────────────────────────────────────


@dataclass
class Entry:
    position: int
    command: str


class CommandList:
    """Ordered entries plus the focused index.

    ``entries[i].position == i`` holds after every mutation. ``focus`` is
    ``None`` only while the list is empty.
    """

    def __init__(self, entries: Optional[List[Entry]] = None, limit: int = 50,
                 focus: Optional[int] = None):
        self.entries: List[Entry] = list(entries or [])
        self.limit = limit
        self.reindex()
        if focus is None and self.entries:
            focus = 0
        self.focus = focus
        self._clamp_focus()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"CommandList({self.entries!r}, limit={self.limit}, focus={self.focus})"

    @property
    def is_full(self) -> bool:
        return len(self.entries) >= self.limit

    @property
    def commands(self) -> List[str]:
        return [e.command for e in self.entries]

    @property
    def focused(self) -> Optional[Entry]:
        if self.focus is None:
            return None
        return self.entries[self.focus]

    def reindex(self):
        for i, e in enumerate(self.entries):
            e.position = i

    def _clamp_focus(self):
        if not self.entries:
            self.focus = None
        elif self.focus is None:
            self.focus = 0
        elif self.focus > len(self.entries) - 1:
            self.focus = len(self.entries) - 1
        elif self.focus < 0:
            self.focus = 0

    def append(self, command: str = "") -> bool:
        if self.is_full:
            return False
        self.entries.append(Entry(len(self.entries), command))
        if self.focus is None:
            self.focus = len(self.entries) - 1
        return True

    def remove_at(self, index: int) -> bool:
        """Remove one entry; the next entry slides under the focus."""
        if not 0 <= index < len(self.entries):
            return False
        del self.entries[index]
        self.reindex()
        if self.focus is not None and index < self.focus:
            self.focus -= 1
        self._clamp_focus()
        return True

    def update_command_at(self, index: int, text: str):
        self.entries[index].command = text

    def focus_next(self):
        if not self.entries:
            return
        self.focus = (self.focus + 1) % len(self.entries)

    def focus_prev(self):
        if not self.entries:
            return
        self.focus = (self.focus - 1) % len(self.entries)

    def focus_at(self, index: int):
        if 0 <= index < len(self.entries):
            self.focus = index


# ── Storage ───────────────────────────────────────────────────────────


def encode_entries(entries: List[Entry]) -> str:
    return json.dumps([{"id": e.position, "cmd": e.command} for e in entries], indent=2)


def decode_entries(text: str) -> List[Entry]:
    """Parse the stored JSON array. Raises ValueError on anything malformed."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of commands")
    out: List[Entry] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"item {i} is not an object")
        pos = item.get("id")
        cmd = item.get("cmd")
        if not isinstance(pos, int) or isinstance(pos, bool):
            raise ValueError(f"item {i} has no integer 'id'")
        if not isinstance(cmd, str):
            raise ValueError(f"item {i} has no string 'cmd'")
        out.append(Entry(pos, cmd))
    return out


class CommandStore:
    """Whole-file JSON storage for the command list."""

    def __init__(self, path):
        self.path = Path(path)

    def _ensure_dir(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("io", self.path.parent, f"cannot create directory: {e}") from e

    def load(self, limit: int = 50) -> CommandList:
        self._ensure_dir()
        try:
            text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        except OSError as e:
            raise StorageError("io", self.path, f"cannot read: {e}") from e

        if not text.strip():
            log.debug("initializing %s with one empty command", self.path)
            initial = CommandList([Entry(0, "")], limit=limit)
            self.save(initial)
            return initial

        try:
            entries = decode_entries(text)
        except ValueError as e:
            raise StorageError("format", self.path, f"malformed command list: {e}") from e
        if any(e.position != i for i, e in enumerate(entries)):
            log.warning("%s has stale ids, renumbering", self.path)
        log.debug("loaded %d command(s) from %s", len(entries), self.path)
        return CommandList(entries, limit=limit)

    def save(self, commands: CommandList):
        commands.reindex()
        data = encode_entries(commands.entries)
        self._ensure_dir()
        tmp = None
        try:
            fd, tmp = tempfile.mkstemp(prefix=".cla-", dir=str(self.path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp and os.path.exists(tmp):
                os.remove(tmp)
            raise StorageError("io", self.path, f"cannot write: {e}") from e
        log.debug("saved %d command(s) to %s", len(commands), self.path)


# ── Edit buffer ───────────────────────────────────────────────────────


class EditBuffer:
    """Single-line text with a cursor, capped at CHAR_LIMIT characters."""

    def __init__(self, text: str = ""):
        self._text = ""
        self._cursor = 0
        self.set_text(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def insert(self, s: str):
        room = CHAR_LIMIT - len(self._text)
        if room <= 0:
            return
        s = s[:room]
        self._text = self._text[: self._cursor] + s + self._text[self._cursor :]
        self._cursor += len(s)

    def backspace(self):
        if self._cursor > 0:
            self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
            self._cursor -= 1

    def delete(self):
        if self._cursor < len(self._text):
            self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]

    def move_left(self):
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self):
        if self._cursor < len(self._text):
            self._cursor += 1

    def move_home(self):
        self._cursor = 0

    def move_end(self):
        self._cursor = len(self._text)

    def kill_to_start(self):
        self._text = self._text[self._cursor :]
        self._cursor = 0

    def kill_to_end(self):
        self._text = self._text[: self._cursor]

    def set_text(self, text: str):
        self._text = text[:CHAR_LIMIT]
        self._cursor = len(self._text)


# ── Key map ───────────────────────────────────────────────────────────


class Event(Enum):
    QUIT = "quit"
    ADD = "add"
    SAVE = "save"
    DELETE = "delete"
    EXECUTE = "execute"
    NEXT = "next"
    PREV = "prev"
    INSERT = "insert"
    BACKSPACE = "backspace"
    DELETE_CHAR = "delete_char"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    KILL_START = "kill_start"
    KILL_END = "kill_end"


EDIT_KEYS = {
    "backspace": Event.BACKSPACE,
    "delete": Event.DELETE_CHAR,
    "left": Event.LEFT,
    "right": Event.RIGHT,
    "home": Event.HOME,
    "end": Event.END,
    "ctrl+u": Event.KILL_START,
    "ctrl+k": Event.KILL_END,
}


class KeyMap:
    """Turns key names into semantic events. Configured keys win over editing keys."""

    def __init__(self, config: Config):
        self.actions = {
            config.exec_key: Event.EXECUTE,
            config.save_key: Event.SAVE,
            config.del_key: Event.DELETE,
            config.add_key: Event.ADD,
            config.quit_key: Event.QUIT,
        }

    def resolve(self, key: str, character: Optional[str] = None,
                printable: bool = False) -> Optional[Tuple[Event, Optional[str]]]:
        if key in self.actions:
            return self.actions[key], None
        if key in NAV_NEXT_KEYS:
            return Event.NEXT, None
        if key in NAV_PREV_KEYS:
            return Event.PREV, None
        if key in EDIT_KEYS:
            return EDIT_KEYS[key], None
        if printable and character:
            return Event.INSERT, character
        return None


# ── Session controller ────────────────────────────────────────────────


class Phase(Enum):
    EDITING = "editing"
    EXITING = "exiting"
    EXECUTING = "executing"


class LauncherSession:
    """One run of the launcher, from load to quit or execute.

    ``commands`` is the working copy the user edits. Add and delete re-read
    the file and write back only the structural change, so text typed into
    other entries is never persisted until an explicit save.
    """

    def __init__(self, store: CommandStore, config: Config):
        self.store = store
        self.config = config
        self.commands = store.load(config.limit_line)
        self.buffers = [EditBuffer(e.command) for e in self.commands]
        # Entries hold exactly what their buffers can show
        for i, buf in enumerate(self.buffers):
            self.commands.update_command_at(i, buf.text)
        self.phase = Phase.EDITING
        self.result: Optional[str] = None

    @property
    def focus(self) -> Optional[int]:
        return self.commands.focus

    @property
    def finished(self) -> bool:
        return self.phase is not Phase.EDITING

    def buffer(self, index: int) -> EditBuffer:
        return self.buffers[index]

    def handle(self, event: Event, text: Optional[str] = None) -> Optional[str]:
        """Apply one event. Returns a short status message, if any."""
        if self.finished:
            return None
        if event is Event.QUIT:
            return self.quit()
        if event is Event.ADD:
            return self.add()
        if event is Event.SAVE:
            return self.save()
        if event is Event.DELETE:
            return self.delete()
        if event is Event.EXECUTE:
            return self.execute()
        if event is Event.NEXT:
            self.commands.focus_next()
            return None
        if event is Event.PREV:
            self.commands.focus_prev()
            return None
        self.edit(event, text)
        return None

    def quit(self) -> Optional[str]:
        self.phase = Phase.EXITING
        self.result = None
        log.debug("session quit")
        return None

    def add(self) -> Optional[str]:
        if self.commands.is_full:
            return f"Line limit reached ({self.config.limit_line})"
        stored = self.store.load(self.config.limit_line)
        stored.append("")
        self.store.save(stored)
        self.commands.append("")
        self.buffers.append(EditBuffer())
        log.debug("added line %d", len(self.commands) - 1)
        return None

    def save(self) -> Optional[str]:
        self.store.save(self.commands)
        return f"Saved {len(self.commands)} line(s)"

    def delete(self) -> Optional[str]:
        idx = self.commands.focus
        if idx is None:
            return None
        stored = self.store.load(self.config.limit_line)
        stored.remove_at(idx)
        self.store.save(stored)
        self.commands.remove_at(idx)
        del self.buffers[idx]
        log.debug("deleted line %d, focus now %s", idx, self.commands.focus)
        return f"Removed line {idx}"

    def execute(self) -> Optional[str]:
        entry = self.commands.focused
        if entry is None:
            return None
        self.result = entry.command
        self.phase = Phase.EXECUTING
        log.debug("executing line %d: %r", entry.position, entry.command)
        return None

    def edit(self, event: Event, text: Optional[str] = None):
        idx = self.commands.focus
        if idx is None:
            return
        buf = self.buffers[idx]
        if event is Event.INSERT:
            buf.insert(text or "")
        elif event is Event.BACKSPACE:
            buf.backspace()
        elif event is Event.DELETE_CHAR:
            buf.delete()
        elif event is Event.LEFT:
            buf.move_left()
        elif event is Event.RIGHT:
            buf.move_right()
        elif event is Event.HOME:
            buf.move_home()
        elif event is Event.END:
            buf.move_end()
        elif event is Event.KILL_START:
            buf.kill_to_start()
        elif event is Event.KILL_END:
            buf.kill_to_end()
        if buf.text != self.commands.entries[idx].command:
            self.commands.update_command_at(idx, buf.text)


# ── Rendering ─────────────────────────────────────────────────────────

DEFAULT_CSS = """
Screen {
    background: $surface;
}

#title {
    height: 1;
    padding: 0 1;
}

CommandListWidget {
    height: 1fr;
    border: heavy $accent;
    scrollbar-size: 1 1;
}

CommandListWidget > .option-list--option-highlighted {
    background: $surface;
}

HelpBar {
    height: auto;
    padding: 0 1;
}

#footer {
    height: 1;
    dock: bottom;
    background: $surface;
    padding: 0 1;
}
"""

HELP_ROWS = [
    ("exec_key", "Execute selected line."),
    ("save_key", "Save all lines."),
    ("del_key", "Remove current line."),
    ("add_key", "Add a line at end."),
    ("quit_key", "Exit."),
]


def build_entry_row(entry: Entry, buf: EditBuffer, focused: bool, config: Config) -> Text:
    """Build a Rich Text row: "| 3: > command" with the cursor on the focused row."""
    focus_style = Style(color=config.focused_text_color)
    text = Text()
    text.append(f"|{entry.position:2d}: ")
    if not focused:
        text.append(BLURRED_PROMPT)
        if buf.text:
            text.append(buf.text)
        else:
            text.append(PLACEHOLDER, style=Style(dim=True))
        return text

    text.append(FOCUSED_PROMPT, style=focus_style)
    if not buf.text:
        text.append(PLACEHOLDER[:1], style=Style(dim=True, reverse=True))
        text.append(PLACEHOLDER[1:], style=Style(dim=True))
        return text
    before = buf.text[: buf.cursor]
    at = buf.text[buf.cursor : buf.cursor + 1] or " "
    after = buf.text[buf.cursor + 1 :]
    text.append(before, style=focus_style)
    text.append(at, style=focus_style + Style(reverse=True))
    text.append(after, style=focus_style)
    return text


def build_help_table(config: Config) -> Text:
    dim = Style(color=config.unfocused_text_color)
    keys = config.action_keys
    text = Text()
    text.append("+" + "-" * 45 + "+\n", style=dim)
    for name, label in HELP_ROWS:
        text.append(f"| {keys[name]:<17s} | {label:<23s} |\n", style=dim)
    text.append("+" + "-" * 45 + "+", style=dim)
    return text


class CommandListWidget(OptionList):
    """Scrollable command rows."""

    # All key routing is done in ClaApp.on_key
    BINDINGS = []

    def rebuild(self, session: LauncherSession):
        config = session.config
        self.clear_options()
        self.add_options([
            Option(build_entry_row(e, session.buffer(i), i == session.focus, config), id=f"line-{i}")
            for i, e in enumerate(session.commands)
        ])
        if session.focus is not None:
            self.highlighted = session.focus


class HelpBar(Static):
    """Key binding table under the list."""


class FooterBar(Static):
    """Single-line status bar at the bottom of the screen."""

    status = reactive("")
    position = reactive("")

    def render(self) -> Text:
        text = Text()
        if self.status:
            text.append(f" {self.status} ", style=Style(color="green", bold=True))
        else:
            text.append(" cla ", style=Style(dim=True))
        if self.position:
            text.append("  ")
            text.append(self.position, style=Style(dim=True))
        return text


# ── App ───────────────────────────────────────────────────────────────


class ClaApp(App):
    """Textual front end for a LauncherSession."""

    CSS = DEFAULT_CSS
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "quit_session", "Quit", show=False, priority=True),
    ]

    def __init__(self, config: Config, store: CommandStore):
        super().__init__()
        self.config = config
        self.keymap = KeyMap(config)
        self.session = LauncherSession(store, config)
        self.exit_action: Optional[Tuple[str, str]] = None
        self.error: Optional[ClaError] = None
        self._status_timer = None

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(id="title")
            yield CommandListWidget(id="command-list")
            yield HelpBar(build_help_table(self.config), id="help")
        yield FooterBar(id="footer")

    def on_mount(self):
        title = Text("cla", style=Style(color=self.config.focused_text_color, bold=True))
        title.append(f"  {self.session.store.path}", style=Style(color=self.config.unfocused_text_color))
        self.query_one("#title", Static).update(title)
        self._refresh_list()
        self.query_one("#command-list", CommandListWidget).focus()

    def _refresh_list(self):
        self.query_one("#command-list", CommandListWidget).rebuild(self.session)
        footer = self.query_one("#footer", FooterBar)
        if self.session.focus is not None:
            footer.position = f"{self.session.focus + 1}/{len(self.session.commands)}"
        else:
            footer.position = "empty"

    def _set_status(self, msg, ttl=3):
        footer = self.query_one("#footer", FooterBar)
        footer.status = msg
        if self._status_timer:
            self._status_timer.stop()
        self._status_timer = self.set_timer(ttl, self._clear_status)

    def _clear_status(self):
        self.query_one("#footer", FooterBar).status = ""

    def _dispatch(self, event: Event, text: Optional[str] = None):
        try:
            msg = self.session.handle(event, text)
        except StorageError as e:
            log.error("storage failure: %s", e)
            self.error = e
            self.exit()
            return
        if self.session.phase is Phase.EXITING:
            self.exit()
            return
        if self.session.phase is Phase.EXECUTING:
            self.exit_action = ("exec", self.session.result or "")
            self.exit()
            return
        self._refresh_list()
        if msg:
            self._set_status(msg)

    def on_key(self, event) -> None:
        resolved = self.keymap.resolve(event.key, event.character, event.is_printable)
        if resolved is None:
            return
        event.stop()
        event.prevent_default()
        self._dispatch(*resolved)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected):
        # Mouse clicks move the focus
        self.session.commands.focus_at(event.option_index)
        self._refresh_list()

    def action_quit_session(self):
        # ctrl+c may itself be a configured key
        event = self.keymap.actions.get("ctrl+c", Event.QUIT)
        self._dispatch(event)


# ── Execution ─────────────────────────────────────────────────────────


def shell_name() -> str:
    if sys.platform == "win32":
        return "bash.exe"
    return "sh"


def exec_command(command: str):
    """Replace this process with the shell running *command*."""
    shell = shell_name()
    log.debug("exec %s -c %r", shell, command)
    for h in log.handlers:
        h.flush()
    try:
        os.execvp(shell, [shell, "-c", command])
    except OSError as e:
        raise ClaError(f"cannot start {shell}: {e}") from e


# ── CLI ───────────────────────────────────────────────────────────────


def setup_logging(debug: bool):
    if not debug:
        return
    home = cla_home()
    home.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(home / LOG_NAME, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)


def cmd_help():
    print("""\033[1;36m◆ cla — Command Launcher\033[0m

\033[1mUsage:\033[0m
  cla                                    Interactive TUI
  cla list                               List stored commands
  cla run <index>                        Run a stored command directly
  cla path                               Print the data file path
  cla config                             Print the effective configuration
  cla help                               Show this help

\033[1mOptions:\033[0m
  --config <path>                        Use another config file
  --debug                                Write a debug log to ~/.cla/cla.log

\033[2mKey bindings are shown at the bottom of the TUI.\033[0m""")


def cmd_list(config: Config, store: CommandStore):
    commands = store.load(config.limit_line)
    if not len(commands):
        print("No commands stored.")
        return
    for e in commands:
        print(f"  {e.position:2d}  {e.command}")


def cmd_run(config: Config, store: CommandStore, index: str):
    try:
        i = int(index)
    except ValueError:
        print(f"\033[31mNot a line number: {index}\033[0m")
        sys.exit(1)
    commands = store.load(config.limit_line)
    if not 0 <= i < len(commands):
        print(f"\033[31mNo line {i} (have {len(commands)})\033[0m")
        sys.exit(1)
    cmd = commands.entries[i].command
    if not cmd:
        print(f"\033[33mLine {i} is empty\033[0m")
        return
    print(f"\033[1;36m◆\033[0m {cmd}")
    exec_command(cmd)


def cmd_path(config: Config):
    print(config.data_path)


def cmd_config(config: Config):
    print(json.dumps(config.to_dict(), indent=2))


def run_tui(config: Config, store: CommandStore):
    app = ClaApp(config, store)
    app.run()
    if app.error is not None:
        raise app.error
    action = app.exit_action
    if action is None:
        return
    if action[0] == "exec" and action[1]:
        exec_command(action[1])


def _split_options(args: List[str]) -> Tuple[Optional[str], bool, List[str]]:
    cfg_path = None
    debug = False
    rest: List[str] = []
    i = 0
    while i < len(args):
        if args[i] == "--config":
            if i + 1 >= len(args):
                print("\033[31mUsage: cla --config <path>\033[0m")
                sys.exit(1)
            cfg_path = args[i + 1]
            i += 2
        elif args[i] == "--debug":
            debug = True
            i += 1
        else:
            rest.append(args[i])
            i += 1
    return cfg_path, debug, rest


def main(argv: Optional[List[str]] = None):
    cfg_path, debug, args = _split_options(list(sys.argv[1:] if argv is None else argv))
    setup_logging(debug)

    if args and args[0] in ("help", "-h", "--help"):
        cmd_help()
        return

    try:
        config = load_config(cfg_path)
        store = CommandStore(config.data_path)

        if not args:
            run_tui(config, store)
            return

        verb = args[0]
        if verb == "list":
            cmd_list(config, store)
        elif verb == "run":
            if len(args) < 2:
                print("\033[31mUsage: cla run <index>\033[0m")
                sys.exit(1)
            cmd_run(config, store, args[1])
        elif verb == "path":
            cmd_path(config)
        elif verb == "config":
            cmd_config(config)
        else:
            print(f"\033[31mUnknown command: {verb}\033[0m")
            print("Run 'cla help' for usage information.")
            sys.exit(1)
    except ClaError as e:
        log.error("fatal: %s", e)
        print(f"\033[31mcla: {e}\033[0m", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
