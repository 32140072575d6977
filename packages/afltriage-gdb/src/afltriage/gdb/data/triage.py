"""Walk every thread of the stopped inferior and print a JSON crash report.

Sourced by gdb (``-x``) after the inferior has stopped.  The report goes to
stdout as a single JSON document; any failure is written to stderr and
nothing is printed to stdout.
"""

import json
import sys

import gdb

UNKNOWN_LINE = -1


def _safe_str(value):
    try:
        return str(value)
    except gdb.error as exc:
        return "<error: %s>" % exc


def _load_mappings():
    """Return ``(start, end, objfile)`` tuples from the inferior's mappings."""
    mappings = []
    try:
        text = gdb.execute("info proc mappings", to_string=True)
    except gdb.error:
        return mappings

    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 5 or not parts[0].startswith("0x"):
            continue
        try:
            start = int(parts[0], 16)
            end = int(parts[1], 16)
        except ValueError:
            continue
        objfile = parts[-1] if parts[-1].startswith("/") else ""
        mappings.append((start, end, objfile))
    return mappings


def _module_for(pc, mappings):
    """Return ``(module, relative_address)`` for *pc*."""
    for start, end, objfile in mappings:
        if start <= pc < end and objfile:
            base = min(s for s, _, o in mappings if o == objfile)
            return objfile, pc - base

    module = gdb.solib_name(pc) or gdb.current_progspace().filename or ""
    return module, pc


def _symbol_for(frame):
    function = frame.function()
    sal = frame.find_sal()

    if function is not None:
        name = function.print_name or ""
        mangled = function.linkage_name or name
        signature = _safe_str(function.type) if function.type else ""
    else:
        name = frame.name() or ""
        mangled = name
        signature = ""

    filename = ""
    line = UNKNOWN_LINE
    if sal is not None and sal.symtab is not None:
        filename = sal.symtab.filename or ""
        if sal.line > 0:
            line = sal.line

    return {
        "function_name": name,
        "mangled_function_name": mangled,
        "function_signature": signature,
        "file": filename,
        "line": line,
    }


def _variables_for(frame):
    """Return ``(args, locals)`` for the function owning *frame*."""
    args = []
    local_vars = []

    try:
        block = frame.block()
    except RuntimeError:
        return args, local_vars

    while block is not None:
        for sym in block:
            if not (sym.is_argument or sym.is_variable):
                continue
            try:
                value = _safe_str(sym.value(frame))
            except (gdb.error, RuntimeError) as exc:
                value = "<error: %s>" % exc
            entry = {"type": _safe_str(sym.type), "name": sym.print_name, "value": value}
            if sym.is_argument:
                args.append(entry)
            else:
                local_vars.append(entry)
        if block.function is not None:
            break
        block = block.superblock

    return args, local_vars


def _frame_info(frame, mappings):
    pc = frame.pc()
    module, relative = _module_for(pc, mappings)
    args, local_vars = _variables_for(frame)
    return {
        "address": pc,
        "relative_address": relative,
        "module": module,
        "pretty_address": "0x%x" % pc,
        "symbol": _symbol_for(frame),
        "args": args,
        "locals": local_vars,
    }


def _backtrace(thread, mappings):
    thread.switch()
    frames = []
    frame = gdb.newest_frame()
    while frame is not None:
        frames.append(_frame_info(frame, mappings))
        frame = frame.older()
    return frames


def triage():
    current = gdb.selected_thread()
    if current is None:
        raise RuntimeError("No thread selected; the program did not stop")

    mappings = _load_mappings()
    threads = []
    for thread in sorted(gdb.selected_inferior().threads(), key=lambda t: t.num):
        threads.append({"tid": thread.num, "backtrace": _backtrace(thread, mappings)})
    current.switch()

    return {"current_tid": current.num, "threads": threads}


try:
    report = triage()
except (gdb.error, RuntimeError) as exc:
    sys.stderr.write("triage failed: %s\n" % exc)
else:
    sys.stdout.write(json.dumps(report) + "\n")
sys.stdout.flush()
sys.stderr.flush()
