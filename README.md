# minish

A small interactive shell. It reads command lines, expands environment
variables, handles quotes, and runs programs found on `PATH`. Programs can
run on their own or be joined by pipes.

## Features

- Runs external programs by name, looked up through `PATH`. A name that
  starts with `/` or `.` is used as a path as it stands (`/bin/ls`,
  `./script`). If no program is found, the status is 127.
- Pipelines joined with `|`. The status of a pipeline is the status of its
  last command.
- Redirections: `< file`, `> file`, `>> file` and here-documents with
  `<< DELIM`. A file that cannot be opened is reported, and the status
  is 1.
- Variable expansion with `$NAME`, and `$?` for the status of the last
  command. Unknown variables expand to nothing. A line that holds a single
  quote is not expanded. Its single quotes are removed instead.
- If a quote is left open, a `quote> ` prompt asks for more lines until
  the quote is closed.
- Built-in commands: `echo` (with `-n`), `cd` (with no argument it goes to
  `$HOME`), `pwd`, `export` (with no argument it lists `declare -x`
  entries in sorted order), `unset`, `env`, `exit [N]` and `history`.
- History holds up to 1000 entries. Lines that hold only blank text are
  not stored.
- A child killed by a signal gives status 128 plus the signal number.

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minish
```

Then enter commands at the prompt:

```
→ minishell ▸ export GREETING=hello
→ minishell ▸ echo $GREETING world
hello world
→ minishell ▸ ls | wc -l > count.txt
→ minishell ▸ cat << END
> first line
> END
first line
→ minishell ▸ exit 3
```

Ctrl-D (end of input) leaves the shell with status 0. When input is a
terminal, the shell prints `exit` first. Ctrl-C drops the current line and
sets `$?` to 130. `exit N` leaves with status `N` modulo 256. If `exit` is
given more than one argument, or an argument that is not a number, it
reports the problem and the shell keeps running.

## Use from Python

`minish.shell.Shell` can be driven from code. Give it an environment
mapping and the streams it should use. `Shell.run()` returns the exit
status:

```python
import io
from minish.shell import Shell

out = io.StringIO()
shell = Shell({"PATH": "/usr/bin:/bin"}, io.StringIO("echo hi\n"), out, io.StringIO())
status = shell.run()
print(out.getvalue(), status)
```

`Shell.step()` reads and runs one line. `Shell.process_input(line)` runs a
given line.

The shell is split into these modules:

- `minish.environment`: `Environment`, the ordered `NAME=value` table, and
  `check_export_name`.
- `minish.history`: `History`.
- `minish.expansion`: quote completion, quote rewriting and `$` expansion
  (`complete_quotes`, `normalize_quotes` and `expand_variables`, among
  others).
- `minish.redirection`: `parse_command`, `Redirection` and `read_heredoc`.
- `minish.executor`: `run_command`, `run_single`, `run_pipeline` and
  `resolve_executable`.
- `minish.echo` and `minish.builtins`: the built-in commands. `exit`
  raises `ShellExit`.
- `minish.dispatch`: `run_builtin` and the `Session` it works on.

## What it does not do

- There is no `;`, `&&` or `||`, no globbing, no backslash escapes, no
  subshells and no job control.
- History is kept in memory only and is not saved between sessions.
- External programs write to the process's own file descriptors. When the
  shell is given in-memory streams, their output does not go into those
  streams. Only the output of built-in commands does.

## Running the tests

```
pip install .[test]
pytest
```