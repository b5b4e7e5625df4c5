"""Editor boundary: plugin loading, messages, keymaps, autocmds, options.

Everything this package does to the editor goes through a ``Host``. Two
hosts ship here: ``ImportHost`` loads host plugins and the editor API as
Python modules, and ``RecordingHost`` hands back recorders so a setup can
be run dry and its payloads inspected.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

from nvim_python.core.fallbacks import print_error, print_warning
from nvim_python.utils import print_info

logger = logging.getLogger(__name__)


class Host(Protocol):
    def require(self, namespace: str) -> Any: ...

    def notify(self, message: str, level: int) -> None: ...

    def set_keymap(
        self, mode: str, lhs: str, action: str, *, buffer: int, desc: str = ""
    ) -> None: ...

    def create_autocmd(
        self, event: str, *, buffer: int, callback: Callable[[], Any]
    ) -> None: ...

    def create_user_command(
        self, buffer: int, name: str, callback: Callable[[], Any], *, desc: str = ""
    ) -> None: ...

    def format_buffer(self, buffer: int, *, timeout_ms: int) -> None: ...

    def set_local_option(self, name: str, value: Any) -> None: ...


@dataclass
class Keymap:
    mode: str
    lhs: str
    action: str
    buffer: int
    desc: str = ""


@dataclass
class Autocmd:
    event: str
    buffer: int
    callback: Callable[[], Any]


@dataclass
class UserCommand:
    buffer: int
    name: str
    callback: Callable[[], Any]
    desc: str = ""


@dataclass
class EditorState:
    """Editor-side effects recorded by the shipped hosts."""

    keymaps: list[Keymap] = field(default_factory=list)
    autocmds: list[Autocmd] = field(default_factory=list)
    user_commands: list[UserCommand] = field(default_factory=list)
    local_options: dict[str, Any] = field(default_factory=dict)
    formatted: list[tuple[int, int]] = field(default_factory=list)
    messages: list[tuple[int, str]] = field(default_factory=list)


class _RecordingEditor:
    """Shared editor-side implementation: record every effect in ``self.state``."""

    def __init__(self) -> None:
        self.state = EditorState()

    def notify(self, message: str, level: int) -> None:
        self.state.messages.append((level, message))

    def set_keymap(
        self, mode: str, lhs: str, action: str, *, buffer: int, desc: str = ""
    ) -> None:
        self.state.keymaps.append(Keymap(mode, lhs, action, buffer, desc))

    def create_autocmd(
        self, event: str, *, buffer: int, callback: Callable[[], Any]
    ) -> None:
        self.state.autocmds.append(Autocmd(event, buffer, callback))

    def create_user_command(
        self, buffer: int, name: str, callback: Callable[[], Any], *, desc: str = ""
    ) -> None:
        self.state.user_commands.append(UserCommand(buffer, name, callback, desc))

    def format_buffer(self, buffer: int, *, timeout_ms: int) -> None:
        self.state.formatted.append((buffer, timeout_ms))

    def set_local_option(self, name: str, value: Any) -> None:
        self.state.local_options[name] = value


def module_name_for(namespace: str) -> str:
    """Map a plugin namespace to its Python module name (``null-ls`` -> ``null_ls``)."""
    return namespace.replace("-", "_")


EDITOR_API = "vim"


def resolve_action(api: Any, action: str) -> Any:
    """Look up a dotted action such as ``lsp.buf.definition`` on the editor API."""
    target = api
    for part in action.split("."):
        target = getattr(target, part)
    return target


class ImportHost(_RecordingEditor):
    """Host whose plugins and editor API are importable Python modules.

    Editor effects go to the ``editor`` module (``vim`` by default), loaded
    the same way plugins are:

        keymaps        -> keymap.set(mode, lhs, fn, opts)
        autocmds       -> api.nvim_create_autocmd(event, opts)
        user commands  -> api.nvim_buf_create_user_command(buf, name, fn, opts)
        formatting     -> lsp.buf.format(opts)
        local options  -> opt_local.<name> = value

    When the editor module cannot be loaded the call raises, so the feature
    that needed it fails inside its own activation boundary. Effects are
    recorded in ``state`` only after the editor accepted them.
    """

    def __init__(self, editor: str = EDITOR_API) -> None:
        super().__init__()
        self.editor = editor

    def require(self, namespace: str) -> Any:
        return importlib.import_module(module_name_for(namespace))

    def editor_api(self) -> Any:
        return self.require(self.editor)

    def set_keymap(
        self, mode: str, lhs: str, action: str, *, buffer: int, desc: str = ""
    ) -> None:
        api = self.editor_api()
        opts = {"noremap": True, "silent": True, "buffer": buffer, "desc": desc}
        api.keymap.set(mode, lhs, resolve_action(api, action), opts)
        super().set_keymap(mode, lhs, action, buffer=buffer, desc=desc)

    def create_autocmd(
        self, event: str, *, buffer: int, callback: Callable[[], Any]
    ) -> None:
        self.editor_api().api.nvim_create_autocmd(
            event, {"buffer": buffer, "callback": callback}
        )
        super().create_autocmd(event, buffer=buffer, callback=callback)

    def create_user_command(
        self, buffer: int, name: str, callback: Callable[[], Any], *, desc: str = ""
    ) -> None:
        self.editor_api().api.nvim_buf_create_user_command(
            buffer, name, callback, {"desc": desc}
        )
        super().create_user_command(buffer, name, callback, desc=desc)

    def format_buffer(self, buffer: int, *, timeout_ms: int) -> None:
        self.editor_api().lsp.buf.format({"timeout_ms": timeout_ms, "bufnr": buffer})
        super().format_buffer(buffer, timeout_ms=timeout_ms)

    def set_local_option(self, name: str, value: Any) -> None:
        setattr(self.editor_api().opt_local, name, value)
        super().set_local_option(name, value)

    def notify(self, message: str, level: int) -> None:
        super().notify(message, level)
        if level >= logging.ERROR:
            print_error(message)
        elif level >= logging.WARNING:
            print_warning(message)
        else:
            print_info(message)


# ── Dry-run host ───────────────────────────────────────────


@dataclass
class PluginCall:
    namespace: str
    path: str
    args: tuple[Any, ...]
    kwargs: dict[str, Any]

    @property
    def target(self) -> str:
        return f"{self.namespace}.{self.path}" if self.path else self.namespace


class RecordingPlugin:
    """Stand-in host plugin: any attribute chain is callable and recorded.

    ``plugin.pyright.setup(payload)`` records a call with path
    ``"pyright.setup"``; every call returns None.
    """

    def __init__(self, namespace: str, calls: list[PluginCall], path: str = ""):
        self._namespace = namespace
        self._calls = calls
        self._path = path

    def __getattr__(self, attr: str) -> RecordingPlugin:
        if attr.startswith("__"):
            raise AttributeError(attr)
        path = f"{self._path}.{attr}" if self._path else attr
        return RecordingPlugin(self._namespace, self._calls, path)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._calls.append(PluginCall(self._namespace, self._path, args, kwargs))

    def __repr__(self) -> str:
        return f"RecordingPlugin({self._namespace!r}, path={self._path!r})"


DEFAULT_AVAILABLE_PLUGINS: frozenset[str] = frozenset({
    "lspconfig",
    "null-ls",
    "nvim-treesitter",
    "cmp",
    "cmp_nvim_lsp",
    "luasnip",
})


class RecordingHost(_RecordingEditor):
    """Host for dry runs and tests; records every plugin call it receives."""

    def __init__(self, available: Iterable[str] | None = None):
        super().__init__()
        self.available = frozenset(
            DEFAULT_AVAILABLE_PLUGINS if available is None else available
        )
        self.calls: list[PluginCall] = []

    def require(self, namespace: str) -> RecordingPlugin:
        root = namespace.split(".", 1)[0]
        if root not in self.available:
            raise ImportError(f"module '{namespace}' not found")
        return RecordingPlugin(namespace, self.calls)

    def calls_to(self, namespace: str) -> list[PluginCall]:
        root = namespace.split(".", 1)[0]
        return [call for call in self.calls if call.namespace.split(".", 1)[0] == root]

    def dispatched(self) -> dict[str, list[Any]]:
        """Map of call target -> payload (last positional argument) of each call."""
        out: dict[str, list[Any]] = {}
        for call in self.calls:
            out.setdefault(call.target, []).append(call.args[-1] if call.args else None)
        return out


__all__ = [
    "EDITOR_API",
    "EditorState",
    "Host",
    "ImportHost",
    "PluginCall",
    "RecordingHost",
    "RecordingPlugin",
    "module_name_for",
    "resolve_action",
]
