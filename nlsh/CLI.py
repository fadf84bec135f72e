#!/usr/bin/env python3
"""
nlsh · Natural Language Shell
Say what you want, get one shell command, run it.

  nlsh                         interactive shell in the current directory
  nlsh "install pandas"        print the generated command
  nlsh -e "list files"         generate and run it
  nlsh -m llama3 "..."         pick the Ollama model
"""

import logging
import sys, shutil, signal, time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.panel   import Panel
from rich.text    import Text
from rich.table   import Table
from rich.rule    import Rule
from rich.align   import Align
from rich          import box
from rich.markup   import escape
from prompt_toolkit             import PromptSession
from prompt_toolkit.history     import InMemoryHistory
from prompt_toolkit.styles      import Style as PTStyle
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.auto_suggest   import AutoSuggest, Suggestion
from prompt_toolkit.completion     import WordCompleter

from nlsh               import __version__
from nlsh.config        import cfg, ConfigError
from nlsh.core          import core, Generation, TurnResult
from nlsh.errors        import InferenceError, EmptyGeneration, RejectedByGate
from nlsh.safety        import RejectReason
from nlsh.tools         import (SessionContext, DirectoryChanged, ProcessExited,
                                ProcessError, Rejected, DispatchOutcome,
                                change_directory, run_command, GitInspector)

logger = logging.getLogger(__name__)

# ── Console & palette ──────────────────────────────────────────────────────────
console = Console(highlight=False)
VERSION = __version__
HISTORY = InMemoryHistory()

CYAN   = "#00f5ff"
GREEN  = "#00ff9f"
YELLOW = "#ffe600"
RED    = "#ff4444"
MAGENTA= "#f472b6"
WHITE  = "#e8eaf6"
DIM    = "#3d4a5c"

def W(): return shutil.get_terminal_size().columns
def ok(m):    console.print(f"  [{GREEN}]✔[/]  [{WHITE}]{m}[/]")
def warn(m):  console.print(f"  [{YELLOW}]⚠[/]  [{WHITE}]{m}[/]")
def err(m):   console.print(f"  [{RED}]✖[/]  [{RED}]{m}[/]")
def info(m):  console.print(f"  [{CYAN}]⬡[/]  [{DIM}]{m}[/]")


@dataclass
class Presentation:
    color: bool = True
    autocomplete: bool = True


def apply_presentation(pres: Presentation):
    global console
    console = Console(highlight=False, no_color=not pres.color)


def setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else getattr(logging, str(cfg.get("log_level", "WARNING")), logging.WARNING)
    try:
        handler = logging.FileHandler(cfg.log_path(), encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(message)s",
        handlers=[handler],
    )


# ── Autocomplete ───────────────────────────────────────────────────────────────

SUGGESTIONS = [
    # built-ins
    "help", "exit", "quit", "path", "pwd", "cwd", "gst", "gitstatus", "config",
    # common actions
    "install ", "create file ", "create folder ", "open file ",
    "go to ", "cd ", "list ", "show files", "show ",
    # python
    "python ", "run ", "execute python code ",
    # git
    "git status", "git log", "git branch",
    "commit all changes with message ",
    "create branch ", "switch to branch ",
    "push changes", "pull latest", "show commit history",
    # packages
    "install pandas", "install numpy", "install express",
    "install react", "install flask", "install django",
]


class SuggestFromList(AutoSuggest):
    """Grey inline completion from a fixed list of phrases."""

    def __init__(self, phrases: List[str]):
        self.phrases = phrases

    def get_suggestion(self, buffer, document) -> Optional[Suggestion]:
        line = document.text
        if not line:
            return None
        for phrase in self.phrases:
            if phrase.startswith(line) and phrase != line:
                return Suggestion(phrase[len(line):])
        return None


# ── Banner & help ──────────────────────────────────────────────────────────────

def show_splash(ctx: SessionContext, model: str):
    git = GitInspector(ctx.cwd)
    console.print()
    console.print(Rule(style=CYAN))
    console.print(Align.center(Text("🧠  NL Shell · Natural Language Shell Interface",
                                    style=f"bold {CYAN}")))
    console.print(Rule(style=CYAN))
    body = (
        f"[{DIM}]  model        [/][bold {YELLOW}]{escape(str(model))}[/]\n"
        f"[{DIM}]  platform     [/][bold {YELLOW}]{ctx.platform.value}[/]"
        f"  [{DIM}]({ctx.profile.dialect})[/]\n"
        f"[{DIM}]  directory    [/][bold {YELLOW}]{escape(str(ctx.cwd))}[/]"
    )
    if git.is_repo():
        body += f"\n[{DIM}]  git          [/][bold {MAGENTA}]{git.current_branch()}[/]"
    console.print(Align.center(Panel(
        body, border_style=CYAN, box=box.DOUBLE_EDGE,
        padding=(0, 4), width=min(78, W()-4),
    )))
    console.print(Align.center(Text.from_markup(
        f"[{DIM}]type[/] [bold {CYAN}]help[/] [{DIM}]for commands ·[/] "
        f"[bold {CYAN}]exit[/] [{DIM}]or[/] [bold {CYAN}]quit[/] [{DIM}]to leave[/]"
    )))
    console.print()


def cmd_help():
    console.print()
    t = Table(box=box.SIMPLE_HEAD, border_style=DIM, header_style=f"bold {CYAN}",
              show_edge=False, padding=(0,2))
    t.add_column("SAY", style=f"bold {CYAN}", min_width=34)
    t.add_column("GET", style=WHITE)
    rows = [
        ("── WHAT I CAN DO ──",""),
        ("install pandas",                "pip / npm package install"),
        ("go to src",                     "change directory"),
        ("create file test.txt",          "create files or folders"),
        ("open file config.json",         "open a file"),
        ("show files",                    "list directory"),
        ("find all .txt files",           "search files"),
        ("python print hello world",      "python one-liners and scripts"),
        ("commit all changes with message 'fix'", "git add + commit"),
        ("create branch feature-x",       "git branches, push, pull, log"),
        ("── BUILT-IN ──",""),
        ("pwd / path / where / cwd",      "show current directory"),
        ("cd <dir>",                      "change directory without asking the model"),
        ("gst / gitstatus",               "git branch and status"),
        ("config",                        "view settings"),
        ("setconfig <key> <value>",       "change a setting (e.g. setconfig model llama3)"),
        ("clear",                         "redraw banner"),
        ("help / ?",                      "this table"),
        ("exit / quit",                   "leave"),
    ]
    for say, get in rows:
        if say.startswith("──"): t.add_row(f"[{DIM}]{say}[/]", "")
        else: t.add_row(say, get)
    console.print(t)
    console.print()


def cmd_pwd(ctx: SessionContext):
    console.print(f"  [{CYAN}]📁[/]  [{CYAN}]{escape(str(ctx.cwd))}[/]")


def cmd_gitstatus(ctx: SessionContext):
    git = GitInspector(ctx.cwd)
    if not git.is_repo():
        err("Not a git repository"); return
    console.print(f"  [{GREEN}]🌱[/]  Branch: [{MAGENTA}]{git.current_branch()}[/]")
    console.print(Text(f"\nStatus:\n{git.status_summary()}", style=DIM))
    console.print()


def cmd_config():
    console.print()
    data = cfg.all()
    lines = []
    for k in ("model", "ollama_url", "request_timeout", "max_command_length",
              "extra_blocked_patterns", "color", "autocomplete", "log_level"):
        if k in data:
            v = data[k]
            if isinstance(v, list): v = ", ".join(v) or "(none)"
            lines.append(f"  [{DIM}]{k:<24}[/] [bold {CYAN}]{escape(str(v))}[/]")
    console.print(Panel(
        "\n".join(lines), title=f"[bold {CYAN}]⬡  CONFIG v{VERSION}[/]",
        subtitle=f"[{DIM}]{cfg.path()}[/]",
        border_style=CYAN, box=box.ROUNDED, padding=(0,2), width=min(82, W()-4),
    ))
    console.print()


def cmd_setconfig(key: str, val: str):
    old = cfg.get(key, "<unset>")
    try: cfg.set(key, val)
    except ConfigError as e: err(escape(str(e))); return
    ok(f"[{DIM}]{key}[/]  [{DIM}]{escape(str(old))}[/]  [{CYAN}]→[/]  [bold {WHITE}]{escape(str(cfg.get(key)))}[/]")
    if key in ("ollama_url", "request_timeout"): core._invalidate_client(); ok("Client refreshed")
    if key in ("color", "autocomplete"): info("Takes effect on next start")


# ── Turn rendering ─────────────────────────────────────────────────────────────

def render_command(gen: Generation):
    note = f"  [{DIM}](rewritten)[/]" if gen.rewritten else ""
    console.print(f"  [{GREEN}]→[/] [bold {WHITE}]{escape(gen.command)}[/]{note}")


def render_outcome(outcome: DispatchOutcome):
    if isinstance(outcome, DirectoryChanged):
        console.print(f"  [{CYAN}]📂[/]  Changed directory to: [{CYAN}]{escape(str(outcome.new_path))}[/]")
    elif isinstance(outcome, ProcessExited):
        if not outcome.ok:
            console.print(f"  [{DIM}]exit {outcome.code}[/]")
    elif isinstance(outcome, ProcessError):
        err(escape(outcome.message))
    elif isinstance(outcome, Rejected):
        if outcome.reason is RejectReason.DENYLISTED:
            err("Unsafe command blocked")
        else:
            err("Command too complex or suspicious - try being more specific")


def render_result(result: TurnResult):
    e = result.error
    if isinstance(e, RejectedByGate):
        info(f"proposed: {escape(e.command[:120])}")
    elif isinstance(e, InferenceError):
        err(f"Error communicating with Ollama: {escape(str(e))}")
    elif isinstance(e, EmptyGeneration):
        err(escape(str(e)))
    elif e is not None:
        err(escape(str(e)))
    if result.outcome is not None:
        render_outcome(result.outcome)


def run_request(text: str, ctx: SessionContext, model: Optional[str] = None,
                execute: bool = True) -> TurnResult:
    status = console.status(f"[{YELLOW}]Thinking...[/]", spinner="dots")
    status.start()

    def _show(gen: Generation):
        status.stop()       # the child may need the terminal next
        render_command(gen)

    try:
        result = core.run_turn(text, ctx, model=model, execute=execute, on_command=_show)
    finally:
        status.stop()
    render_result(result)
    return result


# ── Session loop ───────────────────────────────────────────────────────────────

ALIASES = {
    "?":"help", "path":"pwd", "where":"pwd", "cwd":"pwd",
    "gitstatus":"gst", "q":"exit", "quit":"exit", "cls":"clear",
}
_SINGLE_WORD = {"help", "pwd", "gst", "config", "clear", "exit"}


def handle_input(raw: str, ctx: SessionContext, model: Optional[str] = None) -> Optional[str]:
    """Built-ins first, everything else goes to the model. Returns "EXIT" to leave."""
    text = raw.strip()
    if not text: return None
    parts = text.split()
    cmd = ALIASES.get(parts[0].lower(), parts[0].lower())
    logger.debug("input %r (cwd %s)", text, ctx.cwd)

    if len(parts) == 1 and cmd in _SINGLE_WORD:
        if cmd == "exit":     return "EXIT"
        elif cmd == "help":   cmd_help()
        elif cmd == "pwd":    cmd_pwd(ctx)
        elif cmd == "gst":    cmd_gitstatus(ctx)
        elif cmd == "config": cmd_config()
        elif cmd == "clear":  show_splash(ctx, model or cfg.get("model"))
        return None
    if cmd == "cd":
        render_outcome(change_directory(text[2:].strip().strip("\"'"), ctx))
        return None
    if cmd == "setconfig":
        if len(parts) >= 3: cmd_setconfig(parts[1], " ".join(parts[2:]))
        else: err("Usage: setconfig <key> <value>")
        return None

    run_request(text, ctx, model=model)
    return None


def _prompt_message(ctx: SessionContext, pres: Presentation):
    name = ctx.cwd.name or str(ctx.cwd)
    if not pres.color:
        return f"nlsh [{name}] ❯ "
    return HTML(
        '<ansibrightcyan><b>nlsh</b></ansibrightcyan>'
        '<ansigray> [{}] </ansigray>'
        '<ansibrightcyan><b>❯ </b></ansibrightcyan>'
    ).format(name)


def _make_session(pres: Presentation) -> PromptSession:
    kwargs = dict(history=HISTORY, style=PTStyle.from_dict({"":"#e8eaf6"}))
    if pres.autocomplete:
        kwargs.update(
            completer=WordCompleter(SUGGESTIONS, sentence=True),
            auto_suggest=SuggestFromList(SUGGESTIONS),
        )
    return PromptSession(**kwargs)


def shell_loop(ctx: SessionContext, model: Optional[str] = None,
               pres: Presentation = None):
    pres = pres or Presentation()
    show_splash(ctx, model or cfg.get("model"))

    def _sigint(sig, frame):
        console.print(
            f"\n  [{YELLOW}]⚠[/]  [{DIM}]Ctrl+C · type [/]"
            f"[bold {CYAN}]exit[/][{DIM}] or [/][bold {CYAN}]quit[/][{DIM}] to leave[/]\n"
        )
    signal.signal(signal.SIGINT, _sigint)
    session = _make_session(pres)

    while True:
        try: raw = session.prompt(_prompt_message(ctx, pres))
        except KeyboardInterrupt:
            console.print(f"  [{DIM}](Type 'quit' or 'exit' to leave)[/]"); continue
        except EOFError:
            console.print(); ok("Goodbye"); break

        if handle_input(raw or "", ctx, model=model) == "EXIT":
            console.print(f"  [{YELLOW}]👋 Goodbye[/]"); time.sleep(0.1); break


# ── Entry point ────────────────────────────────────────────────────────────────

def _exit_code(result: TurnResult) -> int:
    if not result.ok: return 1
    if isinstance(result.outcome, ProcessExited): return result.outcome.code
    if isinstance(result.outcome, ProcessError): return 1
    return 0


@click.command(context_settings={"help_option_names":["-h", "--help"]})
@click.argument("prompt", nargs=-1)
@click.option("-e", "--execute", is_flag=True, default=False, help="Execute the generated command.")
@click.option("-m", "--model",   default=None, metavar="NAME", help="Ollama model (default from config: mistral).")
@click.option("--no-color",      is_flag=True, default=False, help="Plain output without colors.")
@click.option("--no-autocomplete", is_flag=True, default=False, help="Disable completion and inline suggestions.")
@click.option("--debug",         is_flag=True, default=False, help="Verbose log to ~/.nlsh/nlsh.log.")
@click.option("--version",       is_flag=True, default=False, help="Show version.")
def main(prompt, execute, model, no_color, no_autocomplete, debug, version):
    """nlsh · natural language to shell commands (Ollama only).

    \b
    Without a PROMPT the interactive shell starts:
      nlsh
      nlsh "install pandas"
      nlsh -e "show files"
    """
    if version:
        click.echo(f"nlsh v{VERSION}"); return
    setup_logging(debug)
    pres = Presentation(
        color=bool(cfg.get("color", True)) and not no_color,
        autocomplete=bool(cfg.get("autocomplete", True)) and not no_autocomplete,
    )
    apply_presentation(pres)
    ctx = SessionContext(cwd=Path.cwd())

    text = " ".join(prompt).strip()
    if not text:
        shell_loop(ctx, model=model, pres=pres)
        return

    result = run_request(text, ctx, model=model, execute=False)
    if result.ok and execute:
        result.outcome = run_command(result.generation.command, ctx)
        render_outcome(result.outcome)
    sys.exit(_exit_code(result))


if __name__ == "__main__":
    main()
